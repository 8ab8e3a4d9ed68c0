"""
Notification ledger: which recipients a campaign has already processed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Set

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Min, Q

from registrations.models import NotificationAttempt
from registrations.services.errors import StorageUnavailable
from registrations.services.normalization import canonical_id

logger = logging.getLogger(__name__)


def campaign_key_for(occurrence_id: str, target_date: str) -> str:
    return f"{occurrence_id}_{target_date}"


@dataclass
class CampaignSummary:
    campaign_key: str
    occurrence_id: str
    target_date: str
    total: int
    successful: int
    first_attempt_at: Optional[datetime]

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def as_dict(self) -> dict:
        return {
            'campaign_key': self.campaign_key,
            'occurrence_id': self.occurrence_id,
            'target_date': self.target_date,
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'first_attempt_at': self.first_attempt_at.isoformat() if self.first_attempt_at else None,
        }


class NotificationLedger:
    """
    Append-only record of notification attempts.

    Every attempt, successful or not, marks the recipient as processed
    for its campaign. Each attempt is written as soon as it is recorded,
    so an interrupted broadcast leaves exactly the sends that happened.
    """

    def already_attempted(self, campaign_key: str, recipient_id) -> bool:
        try:
            return NotificationAttempt.objects.filter(
                campaign_key=campaign_key,
                recipient_id=canonical_id(recipient_id),
            ).exists()
        except DatabaseError as e:
            logger.error(f"Notification ledger unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def attempted_recipients(self, campaign_key: str, recipient_ids: Iterable[str]) -> Set[str]:
        """Return the subset of recipient_ids with an attempt for the campaign."""
        ids = [canonical_id(r) for r in recipient_ids]
        if not ids:
            return set()
        try:
            return set(
                NotificationAttempt.objects
                .filter(campaign_key=campaign_key, recipient_id__in=ids)
                .values_list('recipient_id', flat=True)
            )
        except DatabaseError as e:
            logger.error(f"Notification ledger unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def record_attempt(
        self,
        campaign_key: str,
        recipient_id,
        occurrence_id: str,
        target_date: str,
        succeeded: bool,
        error_message: Optional[str] = None,
    ) -> NotificationAttempt:
        """
        Append one attempt and persist it immediately.

        If another writer already recorded an attempt for the same campaign
        and recipient, that attempt is kept and returned.

        Raises:
            StorageUnavailable: If the attempt cannot be written
        """
        recipient_id = canonical_id(recipient_id)
        try:
            with transaction.atomic():
                attempt = NotificationAttempt.objects.create(
                    campaign_key=campaign_key,
                    recipient_id=recipient_id,
                    occurrence_id=occurrence_id,
                    target_date=target_date,
                    succeeded=succeeded,
                    error_message=error_message,
                )
        except IntegrityError:
            logger.warning(
                f"Attempt {campaign_key} -> {recipient_id} already recorded "
                f"by a concurrent broadcast, keeping the existing entry"
            )
            return self._get(campaign_key, recipient_id)
        except DatabaseError as e:
            logger.error(
                f"Notification ledger unavailable, could not record attempt "
                f"{campaign_key} -> {recipient_id}: {e}",
                exc_info=True
            )
            raise StorageUnavailable(str(e)) from e

        logger.debug(f"Recorded attempt {attempt}")
        return attempt

    def _get(self, campaign_key: str, recipient_id: str) -> Optional[NotificationAttempt]:
        try:
            return NotificationAttempt.objects.filter(
                campaign_key=campaign_key,
                recipient_id=recipient_id,
            ).first()
        except DatabaseError as e:
            raise StorageUnavailable(str(e)) from e

    def campaign_summary(self, campaign_key: str) -> Optional[CampaignSummary]:
        """Return the summary for one campaign, or None if it has no attempts."""
        summaries = self._summaries(campaign_key=campaign_key)
        return summaries[0] if summaries else None

    def all_campaign_summaries(self) -> List[CampaignSummary]:
        """Return every campaign, most recently started first."""
        return self._summaries()

    def _summaries(self, **filters) -> List[CampaignSummary]:
        try:
            rows = list(
                NotificationAttempt.objects
                .filter(**filters)
                .values('campaign_key', 'occurrence_id', 'target_date')
                .annotate(
                    total=Count('id'),
                    successful=Count('id', filter=Q(succeeded=True)),
                    first_attempt_at=Min('attempted_at'),
                )
                .order_by('-first_attempt_at', 'campaign_key')
            )
        except DatabaseError as e:
            logger.error(f"Notification ledger unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

        return [
            CampaignSummary(
                campaign_key=row['campaign_key'],
                occurrence_id=row['occurrence_id'],
                target_date=row['target_date'],
                total=row['total'],
                successful=row['successful'],
                first_attempt_at=row['first_attempt_at'],
            )
            for row in rows
        ]
