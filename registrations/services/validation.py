"""
Validation service for registration and broadcast requests.
"""
import re
import logging
from datetime import datetime, timezone as dt_timezone
from typing import Tuple, Optional, Any

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from registrations.services.errors import InvalidRequest
from registrations.services.normalization import canonical_id

logger = logging.getLogger(__name__)

# Rejection codes (configurable in settings)
MISSING_REQUIRED_FIELD = getattr(settings, 'MISSING_REQUIRED_FIELD', 'MISSING_REQUIRED_FIELD')
INVALID_TIMESTAMP = getattr(settings, 'INVALID_TIMESTAMP', 'INVALID_TIMESTAMP')
FIELD_TOO_LONG = getattr(settings, 'FIELD_TOO_LONG', 'FIELD_TOO_LONG')

TARGET_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

REQUIRED_FIELDS = ('participant_id', 'occurrence_id')

# Column widths of the Registration model
MAX_LENGTHS = {
    'participant_id': 64,
    'participant_name': 255,
    'group_id': 64,
    'group_name': 255,
    'occurrence_id': 64,
    'occurrence_name': 255,
    'contact_phone': 32,
}


def parse_submitted_at(value: Any) -> Optional[datetime]:
    """
    Parse a client-supplied submission timestamp.

    Accepts datetimes, ISO-8601 strings (a trailing ``Z`` included) and
    epoch seconds or milliseconds. Naive values are taken as UTC.

    Returns:
        An aware datetime, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if value > 10_000_000_000 else value
        try:
            parsed = datetime.fromtimestamp(seconds, tz=dt_timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
        except ValueError:
            return None
        if parsed is None:
            return None
    else:
        return None

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def validate_submission(fields: dict) -> Tuple[bool, Optional[str]]:
    """
    Validates a normalized registration submission.

    Rules:
    1. participant_id and occurrence_id must be present and non-empty
    2. Text fields must fit their storage columns
    3. submitted_at, when given, must be a parseable timestamp

    Args:
        fields: Normalized submission (see normalization.normalize_submission)

    Returns:
        Tuple of (is_valid, rejection_reason)
    """
    logger.debug("Validating submission: %s", fields)
    if not fields:
        logger.debug("Validation failed: empty submission")
        return False, MISSING_REQUIRED_FIELD

    for field in REQUIRED_FIELDS:
        if not fields.get(field):
            logger.debug(f"Validation failed: missing or empty required field '{field}'")
            return False, MISSING_REQUIRED_FIELD

    for field, max_length in MAX_LENGTHS.items():
        value = fields.get(field)
        if value is not None and len(str(value)) > max_length:
            logger.debug(f"Validation failed: '{field}' is longer than {max_length} characters")
            return False, FIELD_TOO_LONG

    submitted_at = fields.get('submitted_at')
    if submitted_at not in (None, '') and parse_submitted_at(submitted_at) is None:
        logger.debug(f"Validation failed: submitted_at '{submitted_at}' is not a timestamp")
        return False, INVALID_TIMESTAMP

    logger.debug("Validation passed")
    return True, None


def validate_broadcast(occurrence_id: Any, target_date: Any) -> Tuple[str, str]:
    """
    Check the broadcast parameters and return them trimmed.

    Raises:
        InvalidRequest: If either value is missing or empty, or the date is
            not a real calendar date in YYYY-MM-DD form
    """
    occurrence = canonical_id(occurrence_id)
    date = str(target_date).strip() if target_date is not None else ''

    if not occurrence:
        raise InvalidRequest("Missing required field: occurrence_id")
    if not date:
        raise InvalidRequest("Missing required field: target_date")
    if not TARGET_DATE_PATTERN.match(date):
        raise InvalidRequest(f"target_date must be YYYY-MM-DD, got '{date}'")
    try:
        parsed = parse_date(date)
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidRequest(f"target_date is not a valid date: '{date}'")
    return occurrence, date
