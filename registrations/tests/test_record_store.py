"""
Unit tests for the registration record store.
"""
import threading
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from django.db import DatabaseError, IntegrityError

from registrations.models import Registration
from registrations.services.errors import StorageUnavailable
from registrations.services.normalization import normalize_submission
from registrations.services.record_store import InsertOutcome, RecordStore


@pytest.mark.django_db
class TestInsert:
    """Tests for duplicate-checked insertion."""

    def setup_method(self):
        self.store = RecordStore()

    def test_first_submission_accepted(self, valid_submission):
        result = self.store.insert(normalize_submission(valid_submission))

        assert result.outcome is InsertOutcome.ACCEPTED
        assert result.accepted is True
        record = Registration.objects.get()
        assert record == result.record
        assert record.participant_id == '42'
        assert record.occurrence_id == 'dota'
        assert record.group_name == 'School No. 7'
        assert record.submitted_at == datetime(2024, 5, 20, 10, 15, tzinfo=timezone.utc)

    def test_repeat_submission_is_duplicate(self, valid_submission):
        fields = normalize_submission(valid_submission)
        first = self.store.insert(fields)
        second = self.store.insert(fields)

        assert second.outcome is InsertOutcome.DUPLICATE
        assert second.accepted is False
        assert second.record.id == first.record.id
        assert Registration.objects.count() == 1

    def test_numeric_and_string_ids_are_the_same_participant(self):
        self.store.insert({'participant_id': 123, 'occurrence_id': 'dota'})
        result = self.store.insert({'participant_id': '123', 'occurrence_id': 'dota'})

        assert result.outcome is InsertOutcome.DUPLICATE
        assert Registration.objects.count() == 1

    def test_same_participant_other_occurrence_accepted(self):
        self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})
        result = self.store.insert({'participant_id': '42', 'occurrence_id': 'cs2'})

        assert result.outcome is InsertOutcome.ACCEPTED
        assert Registration.objects.count() == 2

    def test_missing_submitted_at_defaults_to_now(self):
        result = self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})
        assert result.record.submitted_at is not None

    def test_integrity_error_reported_as_duplicate(self):
        existing = Registration.objects.create(
            participant_id='42', occurrence_id='dota',
            submitted_at=datetime(2024, 5, 20, tzinfo=timezone.utc),
        )
        with patch('registrations.services.record_store.Registration.objects.filter') as mock_filter, \
                patch('registrations.services.record_store.Registration.objects.create') as mock_create:
            mock_filter.return_value.first.side_effect = [None, existing]
            mock_create.side_effect = IntegrityError('UNIQUE constraint failed')

            result = self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})

        assert result.outcome is InsertOutcome.DUPLICATE
        assert result.record == existing

    def test_database_error_raises_storage_unavailable(self):
        with patch('registrations.services.record_store.Registration.objects.create') as mock_create:
            mock_create.side_effect = DatabaseError('disk I/O error')
            with pytest.raises(StorageUnavailable):
                self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})

    def test_lock_released_after_failure(self):
        with patch('registrations.services.record_store.Registration.objects.create') as mock_create:
            mock_create.side_effect = DatabaseError('disk I/O error')
            with pytest.raises(StorageUnavailable):
                self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})

        acquired = self.store._lock.acquire(blocking=False)
        assert acquired is True
        self.store._lock.release()

        result = self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})
        assert result.outcome is InsertOutcome.ACCEPTED


@pytest.mark.django_db(transaction=True)
class TestConcurrentInsert:
    """Concurrent submissions of one pair store a single record."""

    def test_racing_threads_store_one_record(self):
        store = RecordStore()
        outcomes = []
        errors = []
        barrier = threading.Barrier(4)

        def submit():
            from django.db import connection
            try:
                barrier.wait()
                outcomes.append(store.insert({'participant_id': '42', 'occurrence_id': 'dota'}).outcome)
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=submit) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert outcomes.count(InsertOutcome.ACCEPTED) == 1
        assert outcomes.count(InsertOutcome.DUPLICATE) == 3
        assert Registration.objects.count() == 1


@pytest.mark.django_db
class TestReads:
    """Tests for list_all, find_by_participant and exists."""

    def setup_method(self):
        self.store = RecordStore()

    def _seed(self):
        self.store.insert({'participant_id': '42', 'occurrence_id': 'dota'})
        self.store.insert({'participant_id': '43', 'occurrence_id': 'dota'})
        self.store.insert({'participant_id': '42', 'occurrence_id': 'cs2'})

    def test_list_all_in_insertion_order(self):
        self._seed()
        records = self.store.list_all()
        assert [(r.participant_id, r.occurrence_id) for r in records] == [
            ('42', 'dota'), ('43', 'dota'), ('42', 'cs2'),
        ]

    def test_find_by_participant_accepts_numeric_id(self):
        self._seed()
        records = self.store.find_by_participant(42)
        assert [r.occurrence_id for r in records] == ['dota', 'cs2']

    def test_find_by_occurrence(self):
        self._seed()
        records = self.store.find_by_occurrence('dota')
        assert [r.participant_id for r in records] == ['42', '43']

    def test_exists(self):
        self._seed()
        assert self.store.exists(42, 'dota') is True
        assert self.store.exists('43', 'cs2') is False

    def test_empty_store(self):
        assert self.store.list_all() == []
        assert self.store.find_by_participant('42') == []

    def test_read_database_error_raises_storage_unavailable(self):
        with patch('registrations.services.record_store.Registration.objects.filter') as mock_filter:
            mock_filter.side_effect = DatabaseError('database is locked')
            with pytest.raises(StorageUnavailable):
                self.store.exists('42', 'dota')
            with pytest.raises(StorageUnavailable):
                self.store.find_by_participant('42')
