"""
Normalization service for registration submissions.
"""
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Wire field -> record field. The legacy names are what the VK mini-app sends.
FIELD_ALIASES = {
    'participant_id': 'participant_id',
    'vk_id': 'participant_id',
    'user_id': 'participant_id',
    'participant_name': 'participant_name',
    'name': 'participant_name',
    'group_id': 'group_id',
    'school_id': 'group_id',
    'group_name': 'group_name',
    'school_name': 'group_name',
    'occurrence_id': 'occurrence_id',
    'game_id': 'occurrence_id',
    'occurrence_name': 'occurrence_name',
    'game_name': 'occurrence_name',
    'contact_phone': 'contact_phone',
    'phone': 'contact_phone',
    'submitted_at': 'submitted_at',
    'date': 'submitted_at',
}

ID_FIELDS = ('participant_id', 'group_id', 'occurrence_id')


def canonical_id(value: Any) -> str:
    """
    Return the canonical string form of an identifier.

    Numbers and numeric strings compare equal once canonicalized:
    ``canonical_id(123) == canonical_id("123") == canonical_id(123.0)``.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value).strip()


def normalize_value(value: Any) -> Any:
    """
    Normalize a single value.

    - Strings: trim whitespace
    - Everything else passes through
    """
    if isinstance(value, str):
        return value.strip()
    return value


def normalize_submission(payload: dict) -> dict:
    """
    Normalizes a registration submission into record fields.

    Operations:
    - Map legacy wire names (vk_id, game_id, school_name, ...) to record fields
    - Canonicalize identifiers to strings
    - Trim whitespace from all other string fields
    - Drop unknown keys

    When both a record field name and its legacy alias are present, the
    record field name wins.

    Args:
        payload: Raw submission data

    Returns:
        Dictionary keyed by record field names
    """
    if not payload:
        return {}

    normalized = {}
    for key, value in payload.items():
        field = FIELD_ALIASES.get(key)
        if field is None:
            continue
        if field in normalized and key != field:
            continue
        if field in ID_FIELDS:
            normalized[field] = canonical_id(value)
        elif value is None:
            normalized[field] = ''
        else:
            normalized[field] = normalize_value(value)

    logger.debug(f"Normalized submission: {normalized}")
    return normalized
