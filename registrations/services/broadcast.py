"""
Broadcast engine: one-time notifications to the participants of an occurrence.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from django.conf import settings

from registrations.services import catalog, notifier
from registrations.services.authorization import AuthorizationPolicy, require_admin
from registrations.services.ledger import NotificationLedger, campaign_key_for
from registrations.services.notifier import DeliveryResult
from registrations.services.record_store import RecordStore
from registrations.services.validation import validate_broadcast

logger = logging.getLogger(__name__)


@dataclass
class RecipientOutcome:
    recipient_id: str
    succeeded: bool
    error: Optional[str] = None


@dataclass
class BroadcastSummary:
    campaign_key: str
    occurrence_id: str
    target_date: str
    total: int
    already_sent: int
    outcomes: List[RecipientOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.attempted - self.sent

    def as_dict(self) -> dict:
        return {
            'campaign_key': self.campaign_key,
            'occurrence_id': self.occurrence_id,
            'target_date': self.target_date,
            'total': self.total,
            'already_sent': self.already_sent,
            'attempted': self.attempted,
            'sent': self.sent,
            'failed': self.failed,
            'outcomes': [
                {'recipient_id': o.recipient_id, 'succeeded': o.succeeded, 'error': o.error}
                for o in self.outcomes
            ],
        }


class BroadcastEngine:
    """
    Sends each participant of an occurrence at most one notification per
    campaign (occurrence + target date).

    Runs on one engine are serialized, so overlapping requests for the same
    campaign see each other's recorded attempts.

    Sends are sequential with a fixed delay between them. A failed send is
    recorded like a successful one and is not retried by later runs of the
    same campaign.
    """

    def __init__(
        self,
        store: RecordStore,
        ledger: NotificationLedger,
        policy: AuthorizationPolicy,
        notify: Optional[Callable[[str, str], DeliveryResult]] = None,
        send_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.ledger = ledger
        self.policy = policy
        self.notify = notify
        self.send_delay = settings.NOTIFICATION_SEND_DELAY if send_delay is None else send_delay
        self.sleep = sleep
        self._lock = threading.Lock()

    def resolve_recipients(self, occurrence_id: str) -> List[str]:
        """Distinct participant ids of an occurrence, in registration order."""
        recipients = []
        seen = set()
        for record in self.store.find_by_occurrence(occurrence_id):
            if record.participant_id not in seen:
                seen.add(record.participant_id)
                recipients.append(record.participant_id)
        return recipients

    def broadcast(self, caller_id, occurrence_id, target_date) -> BroadcastSummary:
        """
        Run one broadcast.

        Workflow:
        1. Authorize the caller
        2. Validate occurrence_id and target_date
        3. Resolve the occurrence's participants
        4. Drop recipients the campaign has already processed
        5. Notify the rest one by one, recording every attempt
        6. Summarize

        Raises:
            Forbidden: Caller is not an administrator
            InvalidRequest: Missing occurrence_id or target_date
            StorageUnavailable: Registrations or ledger cannot be read/written;
                attempts recorded before the fault are kept
        """
        require_admin(self.policy, caller_id)
        occurrence_id, target_date = validate_broadcast(occurrence_id, target_date)
        campaign_key = campaign_key_for(occurrence_id, target_date)

        with self._lock:
            return self._run(campaign_key, occurrence_id, target_date)

    def _run(self, campaign_key: str, occurrence_id: str, target_date: str) -> BroadcastSummary:
        recipients = self.resolve_recipients(occurrence_id)
        already = self.ledger.attempted_recipients(campaign_key, recipients)
        pending = [r for r in recipients if r not in already]

        logger.info(
            f"Broadcast {campaign_key}: {len(recipients)} recipients, "
            f"{len(already)} already processed, {len(pending)} pending"
        )

        summary = BroadcastSummary(
            campaign_key=campaign_key,
            occurrence_id=occurrence_id,
            target_date=target_date,
            total=len(recipients),
            already_sent=len(already),
        )
        if not pending:
            return summary

        message = catalog.compose_message(occurrence_id, target_date)

        for index, recipient_id in enumerate(pending):
            if index and self.send_delay > 0:
                self.sleep(self.send_delay)

            result = self._deliver(recipient_id, message)
            self.ledger.record_attempt(
                campaign_key,
                recipient_id,
                occurrence_id,
                target_date,
                succeeded=result.succeeded,
                error_message=result.error,
            )
            summary.outcomes.append(RecipientOutcome(recipient_id, result.succeeded, result.error))

        logger.info(
            f"Broadcast {campaign_key} finished: {summary.sent} sent, {summary.failed} failed"
        )
        # TODO: expose a "retry failed" operation that re-targets recipients whose
        # only attempt for the campaign has succeeded=False.
        return summary

    def _deliver(self, recipient_id: str, message: str) -> DeliveryResult:
        try:
            notify = self.notify or notifier.notify
            return notify(recipient_id, message)
        except Exception as e:
            logger.error(f"Notifier raised for {recipient_id}: {e}", exc_info=True)
            return DeliveryResult(False, f"{type(e).__name__}: {e}")
