"""
Record store: the durable ledger of accepted registrations.
"""
import enum
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from registrations.models import Registration
from registrations.services.errors import StorageUnavailable
from registrations.services.normalization import canonical_id
from registrations.services.validation import parse_submitted_at

logger = logging.getLogger(__name__)

RECORD_FIELDS = (
    'participant_id',
    'participant_name',
    'group_id',
    'group_name',
    'occurrence_id',
    'occurrence_name',
    'contact_phone',
)


class InsertOutcome(str, enum.Enum):
    ACCEPTED = 'accepted'
    DUPLICATE = 'duplicate'


@dataclass
class InsertResult:
    outcome: InsertOutcome
    record: Optional[Registration]

    @property
    def accepted(self) -> bool:
        return self.outcome is InsertOutcome.ACCEPTED


class RecordStore:
    """
    Append-only registration ledger with duplicate-checked insertion.

    The check-then-append sequence runs under a per-store lock and inside
    a database transaction; the (participant_id, occurrence_id) unique
    constraint catches writers outside this process.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def insert(self, fields: dict) -> InsertResult:
        """
        Insert a registration unless its identity key already exists.

        Args:
            fields: Normalized, validated submission fields

        Returns:
            InsertResult with ACCEPTED and the new record, or DUPLICATE and
            the record already stored for the key

        Raises:
            StorageUnavailable: If the database cannot be read or written
        """
        participant_id = canonical_id(fields.get('participant_id'))
        occurrence_id = canonical_id(fields.get('occurrence_id'))

        values = {name: fields.get(name) or '' for name in RECORD_FIELDS}
        values['participant_id'] = participant_id
        values['occurrence_id'] = occurrence_id
        values['submitted_at'] = parse_submitted_at(fields.get('submitted_at')) or timezone.now()

        with self._lock:
            try:
                with transaction.atomic():
                    existing = Registration.objects.filter(
                        participant_id=participant_id,
                        occurrence_id=occurrence_id,
                    ).first()
                    if existing is not None:
                        logger.info(
                            f"Duplicate registration: participant {participant_id} "
                            f"already registered for {occurrence_id}"
                        )
                        return InsertResult(InsertOutcome.DUPLICATE, existing)

                    record = Registration.objects.create(**values)
            except IntegrityError:
                logger.warning(
                    f"Registration {participant_id}/{occurrence_id} lost a race "
                    f"with a concurrent writer, reporting duplicate"
                )
                return InsertResult(InsertOutcome.DUPLICATE, self._get(participant_id, occurrence_id))
            except DatabaseError as e:
                logger.error(f"Registration store unavailable on insert: {e}", exc_info=True)
                raise StorageUnavailable(str(e)) from e

        logger.info(f"Registration {record.id} accepted: {participant_id} -> {occurrence_id}")
        return InsertResult(InsertOutcome.ACCEPTED, record)

    def list_all(self) -> List[Registration]:
        """Return every registration in insertion order."""
        try:
            return list(Registration.objects.order_by('id'))
        except DatabaseError as e:
            logger.error(f"Registration store unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def find_by_participant(self, participant_id) -> List[Registration]:
        try:
            return list(
                Registration.objects
                .filter(participant_id=canonical_id(participant_id))
                .order_by('id')
            )
        except DatabaseError as e:
            logger.error(f"Registration store unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def find_by_occurrence(self, occurrence_id) -> List[Registration]:
        try:
            return list(
                Registration.objects
                .filter(occurrence_id=canonical_id(occurrence_id))
                .order_by('id')
            )
        except DatabaseError as e:
            logger.error(f"Registration store unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def exists(self, participant_id, occurrence_id) -> bool:
        try:
            return Registration.objects.filter(
                participant_id=canonical_id(participant_id),
                occurrence_id=canonical_id(occurrence_id),
            ).exists()
        except DatabaseError as e:
            logger.error(f"Registration store unavailable on read: {e}", exc_info=True)
            raise StorageUnavailable(str(e)) from e

    def _get(self, participant_id: str, occurrence_id: str) -> Optional[Registration]:
        try:
            return Registration.objects.filter(
                participant_id=participant_id,
                occurrence_id=occurrence_id,
            ).first()
        except DatabaseError as e:
            raise StorageUnavailable(str(e)) from e
