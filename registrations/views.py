"""
API views for the tournament registration gateway.
"""
import functools
import logging
import uuid
from rest_framework.exceptions import ParseError
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator

from registrations.services.errors import Forbidden, InvalidRequest, StorageUnavailable
from registrations.services.gateway import build_gateway

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def get_gateway():
    """Process-wide gateway; its record store lock is shared by every request."""
    return build_gateway()


class GatewayView(APIView):
    """
    Base view: runs a gateway operation and maps its errors to responses.

    Every response carries a correlation_id for request tracing.
    - 400 Bad Request: InvalidRequest or malformed JSON
    - 403 Forbidden: caller is not the administrator
    - 503 Service Unavailable: storage fault, safe to retry
    - 500 Internal Server Error: anything else
    """

    def run(self, operation, build_body):
        correlation_id = str(uuid.uuid4())
        try:
            result = operation()
            body = build_body(result)
            body['correlation_id'] = correlation_id
            return Response(body, status=status.HTTP_200_OK)

        except (InvalidRequest, ParseError) as e:
            logger.warning(f"Invalid request: {e}, correlation_id={correlation_id}")
            return Response(
                {
                    'error': str(e),
                    'correlation_id': correlation_id
                },
                status=status.HTTP_400_BAD_REQUEST
            )
        except Forbidden:
            return Response(
                {
                    'error': 'Forbidden',
                    'correlation_id': correlation_id
                },
                status=status.HTTP_403_FORBIDDEN
            )
        except StorageUnavailable as e:
            logger.error(f"Storage unavailable: {e}, correlation_id={correlation_id}")
            return Response(
                {
                    'error': 'Storage unavailable',
                    'retryable': True,
                    'correlation_id': correlation_id
                },
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        except Exception as e:
            logger.error(
                f"Error processing request: {e}, "
                f"correlation_id={correlation_id}",
                exc_info=True
            )
            return Response(
                {
                    'error': 'Internal server error',
                    'correlation_id': correlation_id
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class HealthView(APIView):
    """GET / - liveness check."""

    def get(self, request):
        return Response({'status': 'ok', 'message': 'Server is running'})


@method_decorator(csrf_exempt, name='dispatch')
class RegistrationView(GatewayView):
    """
    POST /api/registrations/

    Accepts a sign-up. A repeated (participant, occurrence) pair is answered
    with status "duplicate" rather than an error. "mirrored" reports whether
    the spreadsheet copy was written.
    """

    def post(self, request):
        def submit():
            payload = request.data
            if not payload or not isinstance(payload, dict):
                raise InvalidRequest('Empty payload')
            return get_gateway().submit_registration(payload)

        return self.run(submit, dict)


class ParticipationView(GatewayView):
    """GET /api/participation/?user_id=&game_id="""

    def get(self, request):
        participant_id = request.query_params.get('user_id', '')
        occurrence_id = request.query_params.get('game_id', '')
        return self.run(
            lambda: get_gateway().check_participation(participant_id, occurrence_id),
            lambda participates: {'participates': participates},
        )


class ParticipantOccurrencesView(GatewayView):
    """GET /api/participants/<participant_id>/occurrences/"""

    def get(self, request, participant_id):
        return self.run(
            lambda: get_gateway().list_participant_occurrences(participant_id),
            lambda occurrences: {'occurrences': occurrences},
        )


class ParticipantApplicationsView(GatewayView):
    """GET /api/participants/<participant_id>/applications/"""

    def get(self, request, participant_id):
        return self.run(
            lambda: get_gateway().list_participant_applications(participant_id),
            lambda applications: {'applications': applications},
        )


class AdminCheckView(GatewayView):
    """GET /api/admin/check/?caller_id="""

    def get(self, request):
        caller_id = request.query_params.get('caller_id', '')
        return self.run(
            lambda: get_gateway().is_administrator(caller_id),
            lambda is_admin: {'is_admin': is_admin},
        )


class AdminStatsView(GatewayView):
    """GET /api/admin/stats/?caller_id="""

    def get(self, request):
        caller_id = request.query_params.get('caller_id', '')
        return self.run(
            lambda: get_gateway().get_admin_statistics(caller_id),
            dict,
        )


@method_decorator(csrf_exempt, name='dispatch')
class BroadcastView(GatewayView):
    """
    POST /api/admin/broadcasts/

    Body: {"caller_id": ..., "occurrence_id": ..., "target_date": "YYYY-MM-DD"}
    Notifies every participant of the occurrence not yet processed for this
    (occurrence, date) campaign.
    """

    def post(self, request):
        def broadcast():
            data = request.data if isinstance(request.data, dict) else {}
            return get_gateway().broadcast_notifications(
                data.get('caller_id', ''),
                data.get('occurrence_id'),
                data.get('target_date'),
            )

        return self.run(broadcast, dict)


class CampaignHistoryView(GatewayView):
    """GET /api/admin/campaigns/?caller_id="""

    def get(self, request):
        caller_id = request.query_params.get('caller_id', '')
        return self.run(
            lambda: get_gateway().get_campaign_history(caller_id),
            lambda campaigns: {'campaigns': campaigns},
        )


@method_decorator(csrf_exempt, name='dispatch')
class MirrorCheckView(GatewayView):
    """POST /api/admin/mirror-check/ - writes a test row to the spreadsheet."""

    def post(self, request):
        def probe():
            data = request.data if isinstance(request.data, dict) else {}
            return get_gateway().probe_mirror(data.get('caller_id', ''))

        return self.run(probe, dict)
