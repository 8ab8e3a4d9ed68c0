"""
Registration gateway: the operations the HTTP layer exposes.
"""
import logging
from typing import Callable, List, Optional

from django.conf import settings

from registrations.services import sheets_client
from registrations.services.authorization import AuthorizationPolicy, StaticAdminPolicy, require_admin
from registrations.services.broadcast import BroadcastEngine
from registrations.services.errors import InvalidRequest
from registrations.services.ledger import NotificationLedger
from registrations.services.normalization import normalize_submission
from registrations.services.record_store import RecordStore
from registrations.services.stats import AdminAggregator
from registrations.services.validation import validate_submission
from registrations.tasks import mirror_registration

logger = logging.getLogger(__name__)


def enqueue_mirror_backfill(registration_id: int) -> None:
    mirror_registration.delay(registration_id)


class RegistrationGateway:
    """
    Owns the registration store, the notification ledger and the
    collaborators around them. Build one per process with build_gateway();
    tests build isolated instances directly.
    """

    def __init__(
        self,
        store: RecordStore,
        ledger: NotificationLedger,
        policy: AuthorizationPolicy,
        engine: BroadcastEngine,
        mirror: Optional[Callable] = None,
        schedule_backfill: Optional[Callable[[int], None]] = None,
    ):
        self.store = store
        self.ledger = ledger
        self.policy = policy
        self.engine = engine
        self.aggregator = AdminAggregator(store, ledger, policy)
        self.mirror = mirror
        self.schedule_backfill = schedule_backfill

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def submit_registration(self, payload: dict) -> dict:
        """
        Accept a registration unless the participant is already signed up
        for the occurrence, then mirror it to the spreadsheet.

        Returns:
            {'status': 'accepted'|'duplicate', 'mirrored': bool, 'message': str}

        Raises:
            InvalidRequest: Required fields missing or malformed
            StorageUnavailable: Registration store cannot be read or written
        """
        fields = normalize_submission(payload)
        is_valid, rejection_reason = validate_submission(fields)
        if not is_valid:
            logger.info(f"Registration rejected: {rejection_reason}")
            raise InvalidRequest(rejection_reason)

        result = self.store.insert(fields)
        if not result.accepted:
            return {
                'status': 'duplicate',
                'mirrored': False,
                'message': 'Already registered for this occurrence',
            }

        mirrored = self._mirror(result.record)
        if mirrored:
            message = 'Registration saved and mirrored to spreadsheet'
        else:
            message = 'Registration saved locally (spreadsheet mirror failed)'
            self._schedule_backfill(result.record.id)

        return {
            'status': 'accepted',
            'mirrored': mirrored,
            'message': message,
        }

    def check_participation(self, participant_id, occurrence_id) -> bool:
        return self.store.exists(participant_id, occurrence_id)

    def list_participant_occurrences(self, participant_id) -> List[str]:
        return [r.occurrence_id for r in self.store.find_by_participant(participant_id)]

    def list_participant_applications(self, participant_id) -> List[dict]:
        return [
            {
                'occurrence_id': r.occurrence_id,
                'occurrence_name': r.occurrence_name,
                'group_name': r.group_name,
                'submitted_at': r.submitted_at.isoformat(),
            }
            for r in self.store.find_by_participant(participant_id)
        ]

    # ------------------------------------------------------------------
    # Administrator
    # ------------------------------------------------------------------

    def is_administrator(self, caller_id) -> bool:
        return self.policy.is_authorized(caller_id)

    def get_admin_statistics(self, caller_id) -> dict:
        return self.aggregator.statistics(caller_id)

    def broadcast_notifications(self, caller_id, occurrence_id, target_date) -> dict:
        return self.engine.broadcast(caller_id, occurrence_id, target_date).as_dict()

    def get_campaign_history(self, caller_id) -> List[dict]:
        return self.aggregator.campaign_history(caller_id)

    def probe_mirror(self, caller_id) -> dict:
        require_admin(self.policy, caller_id)
        return sheets_client.mirror_probe()

    # ------------------------------------------------------------------

    def _mirror(self, record) -> bool:
        try:
            mirror = self.mirror or sheets_client.mirror
            return bool(mirror(record))
        except Exception as e:
            logger.error(f"Spreadsheet mirror raised for registration {record.id}: {e}", exc_info=True)
            return False

    def _schedule_backfill(self, registration_id: int) -> None:
        if self.schedule_backfill is None:
            return
        try:
            self.schedule_backfill(registration_id)
            logger.info(f"Registration {registration_id} queued for spreadsheet backfill")
        except Exception as e:
            logger.error(
                f"Could not queue spreadsheet backfill for registration {registration_id}: {e}",
                exc_info=True
            )


def build_gateway() -> RegistrationGateway:
    """Wire a gateway from Django settings."""
    store = RecordStore()
    ledger = NotificationLedger()
    policy = StaticAdminPolicy(settings.ADMIN_ID)
    engine = BroadcastEngine(store, ledger, policy)
    return RegistrationGateway(
        store,
        ledger,
        policy,
        engine,
        schedule_backfill=enqueue_mirror_backfill if settings.MIRROR_BACKFILL_ENABLED else None,
    )
