"""
Spreadsheet mirror client: appends accepted registrations to a Google Sheet.
"""
import logging
import json
import httpx
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


def _format_response(response: httpx.Response) -> str:
    """Return a readable response string (pretty JSON if possible)."""
    try:
        data = response.json()
        return json.dumps(data, indent=2, ensure_ascii=False)
    except Exception:
        return response.text


def _submitted_at_text(value) -> str:
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return str(value or '')


def build_row(record) -> list:
    """
    Build the sheet row for a registration.

    Column order: participant id, participant name, group id, group name,
    occurrence id, occurrence name, phone, submission time.
    """
    return [
        record.participant_id,
        record.participant_name,
        record.group_id,
        record.group_name,
        record.occurrence_id,
        record.occurrence_name,
        record.contact_phone,
        _submitted_at_text(record.submitted_at),
    ]


def is_configured() -> bool:
    return bool(settings.SPREADSHEET_ID and settings.SPREADSHEET_TOKEN)


def append_row(record) -> httpx.Response:
    """
    Appends one registration row to the configured spreadsheet.

    Args:
        record: Registration (or any object with the same attributes)

    Returns:
        HTTP response from the Sheets API

    Raises:
        httpx.HTTPError: On network/timeout errors
    """
    url = (
        f"{settings.SPREADSHEET_API_URL.rstrip('/')}/{settings.SPREADSHEET_ID}"
        f"/values/{settings.SPREADSHEET_RANGE}:append"
    )
    token = settings.SPREADSHEET_TOKEN
    logger.debug("Spreadsheet API token=%s", token)

    headers = {
        'Authorization': f'Bearer {token}',
        'Content-Type': 'application/json',
    }
    params = {
        'valueInputOption': 'RAW',
        'insertDataOption': 'INSERT_ROWS',
    }
    body = {'values': [build_row(record)]}

    logger.info(f"Appending registration row to spreadsheet {settings.SPREADSHEET_ID}")
    logger.debug(f"Row: {body}")

    try:
        response = httpx.post(
            url,
            params=params,
            json=body,
            headers=headers,
            timeout=settings.MIRROR_TIMEOUT
        )

        logger.info(f"Spreadsheet API response: {response.status_code}")
        logger.debug("Spreadsheet API response body:\n%s", _format_response(response))

        return response

    except httpx.TimeoutException as e:
        logger.error(f"Timeout appending to spreadsheet: {e}")
        raise
    except httpx.ConnectError as e:
        logger.error(f"Connection error appending to spreadsheet: {e}")
        raise
    except httpx.HTTPError as e:
        logger.error(f"HTTP error appending to spreadsheet: {e}")
        raise


def mirror(record) -> bool:
    """
    Best-effort mirror of one registration.

    Never raises; the registration stays accepted locally whatever happens
    here.

    Returns:
        True if the spreadsheet acknowledged the row
    """
    if not is_configured():
        logger.warning("Spreadsheet mirror not configured (SPREADSHEET_ID/SPREADSHEET_TOKEN), skipping")
        return False

    try:
        response = append_row(record)
    except httpx.HTTPError:
        return False

    if 200 <= response.status_code < 300:
        logger.info(f"Registration {record.participant_id}/{record.occurrence_id} mirrored to spreadsheet")
        return True

    logger.warning(
        f"Spreadsheet rejected registration {record.participant_id}/{record.occurrence_id}: "
        f"status {response.status_code}"
    )
    return False


class _ProbeRow:
    """Synthetic row used to check spreadsheet connectivity."""

    def __init__(self):
        now = timezone.now()
        self.participant_id = f"test_{int(now.timestamp() * 1000)}"
        self.participant_name = 'Test Participant'
        self.group_id = '1'
        self.group_name = 'Test Group'
        self.occurrence_id = 'test_game'
        self.occurrence_name = 'Test Game'
        self.contact_phone = '+79999999999'
        self.submitted_at = now


def mirror_probe() -> dict:
    """Write a synthetic test row and report whether the spreadsheet took it."""
    row = _ProbeRow()
    succeeded = mirror(row)
    return {
        'success': succeeded,
        'row': build_row(row),
    }
