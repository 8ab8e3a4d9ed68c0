"""
Unit tests for validation service.
"""
from datetime import datetime, timezone

import pytest

from registrations.services.errors import InvalidRequest
from registrations.services.validation import (
    FIELD_TOO_LONG,
    INVALID_TIMESTAMP,
    MISSING_REQUIRED_FIELD,
    parse_submitted_at,
    validate_broadcast,
    validate_submission,
)


class TestValidateSubmission:
    """Tests for validate_submission."""

    def test_valid_submission(self):
        is_valid, reason = validate_submission({
            'participant_id': '42',
            'occurrence_id': 'dota',
            'submitted_at': '2024-05-20T10:15:00Z',
        })
        assert is_valid is True
        assert reason is None

    def test_submitted_at_optional(self):
        is_valid, reason = validate_submission({'participant_id': '42', 'occurrence_id': 'dota'})
        assert is_valid is True

    def test_empty_submission(self):
        assert validate_submission({}) == (False, MISSING_REQUIRED_FIELD)

    @pytest.mark.parametrize('missing', ['participant_id', 'occurrence_id'])
    def test_missing_identifier(self, missing):
        fields = {'participant_id': '42', 'occurrence_id': 'dota'}
        fields[missing] = ''
        assert validate_submission(fields) == (False, MISSING_REQUIRED_FIELD)

    def test_unparseable_timestamp(self):
        fields = {'participant_id': '42', 'occurrence_id': 'dota', 'submitted_at': 'yesterday'}
        assert validate_submission(fields) == (False, INVALID_TIMESTAMP)

    @pytest.mark.parametrize('field, length', [
        ('contact_phone', 33),
        ('participant_name', 256),
        ('group_name', 256),
        ('occurrence_name', 256),
        ('participant_id', 65),
        ('occurrence_id', 65),
        ('group_id', 65),
    ])
    def test_field_longer_than_column(self, field, length):
        fields = {'participant_id': '42', 'occurrence_id': 'dota'}
        fields[field] = 'x' * length
        assert validate_submission(fields) == (False, FIELD_TOO_LONG)

    def test_fields_at_column_width_accepted(self):
        fields = {
            'participant_id': '4' * 64,
            'occurrence_id': 'd' * 64,
            'contact_phone': '+' * 32,
            'participant_name': 'n' * 255,
        }
        assert validate_submission(fields) == (True, None)


class TestParseSubmittedAt:
    """Tests for timestamp parsing."""

    def test_iso_with_z_suffix(self):
        parsed = parse_submitted_at('2024-05-20T10:15:00.000Z')
        assert parsed == datetime(2024, 5, 20, 10, 15, tzinfo=timezone.utc)

    def test_naive_iso_is_utc(self):
        parsed = parse_submitted_at('2024-05-20T10:15:00')
        assert parsed.tzinfo is not None
        assert parsed.utcoffset().total_seconds() == 0

    def test_epoch_seconds(self):
        assert parse_submitted_at(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        parsed = parse_submitted_at(1716200100000)
        assert parsed == datetime.fromtimestamp(1716200100, tz=timezone.utc)

    @pytest.mark.parametrize('value', ['not a date', '2024-13-45T99:00:00', None, True, []])
    def test_invalid_values(self, value):
        assert parse_submitted_at(value) is None


class TestValidateBroadcast:
    """Tests for validate_broadcast."""

    def test_valid(self):
        assert validate_broadcast(' dota ', '2024-06-01') == ('dota', '2024-06-01')

    def test_numeric_occurrence_canonicalized(self):
        assert validate_broadcast(5, '2024-06-01') == ('5', '2024-06-01')

    @pytest.mark.parametrize('occurrence_id, target_date', [
        (None, '2024-06-01'),
        ('', '2024-06-01'),
        ('dota', None),
        ('dota', '   '),
    ])
    def test_missing_values(self, occurrence_id, target_date):
        with pytest.raises(InvalidRequest):
            validate_broadcast(occurrence_id, target_date)

    def test_bad_date_format(self):
        with pytest.raises(InvalidRequest, match='YYYY-MM-DD'):
            validate_broadcast('dota', '01.06.2024')

    @pytest.mark.parametrize('target_date', ['2024-13-45', '2023-02-29', '2024-06-31'])
    def test_impossible_date(self, target_date):
        with pytest.raises(InvalidRequest, match='not a valid date'):
            validate_broadcast('dota', target_date)

    def test_leap_day(self):
        assert validate_broadcast('dota', '2024-02-29') == ('dota', '2024-02-29')
