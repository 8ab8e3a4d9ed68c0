"""
Admin statistics over registrations and notification campaigns.
"""
import logging
from typing import List

from registrations.services.authorization import AuthorizationPolicy, require_admin
from registrations.services.ledger import NotificationLedger
from registrations.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class AdminAggregator:
    """Read-only statistics; every call is administrator-gated."""

    def __init__(self, store: RecordStore, ledger: NotificationLedger, policy: AuthorizationPolicy):
        self.store = store
        self.ledger = ledger
        self.policy = policy

    def statistics(self, caller_id) -> dict:
        """
        Compute submission and campaign statistics.

        Returns:
            Dictionary with total_submissions, unique_participants,
            occurrences (per-occurrence counts and participant ids, in
            first-registration order) and campaigns (most recent first)

        Raises:
            Forbidden: Caller is not an administrator
            StorageUnavailable: Either store cannot be read
        """
        require_admin(self.policy, caller_id)

        records = self.store.list_all()
        participants = set()
        occurrences = {}
        for record in records:
            participants.add(record.participant_id)
            entry = occurrences.setdefault(record.occurrence_id, {
                'occurrence_id': record.occurrence_id,
                'occurrence_name': record.occurrence_name,
                'submissions': 0,
                'participants': set(),
            })
            entry['submissions'] += 1
            entry['participants'].add(record.participant_id)

        per_occurrence = [
            {**entry, 'participants': sorted(entry['participants'])}
            for entry in occurrences.values()
        ]

        logger.debug(
            f"Statistics: {len(records)} submissions, {len(participants)} participants, "
            f"{len(per_occurrence)} occurrences"
        )
        return {
            'total_submissions': len(records),
            'unique_participants': len(participants),
            'occurrences': per_occurrence,
            'campaigns': self._campaigns(),
        }

    def campaign_history(self, caller_id) -> List[dict]:
        require_admin(self.policy, caller_id)
        return self._campaigns()

    def _campaigns(self) -> List[dict]:
        return [summary.as_dict() for summary in self.ledger.all_campaign_summaries()]
