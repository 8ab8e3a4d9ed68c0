"""
Celery tasks for async spreadsheet backfill.
"""
import logging
from celery import shared_task
import httpx

from registrations.models import Registration
from registrations.services import sheets_client
from registrations.services.errors import MirrorServerError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(httpx.TimeoutException, httpx.ConnectError, MirrorServerError),
    retry_backoff=30,  # Exponential backoff starting at 30s
    retry_backoff_max=480,  # Max backoff of 480s (8 minutes)
    max_retries=5,
    retry_jitter=False  # Disable jitter for predictable backoff
)
def mirror_registration(self, registration_id: int):
    """
    Append a registration the inline mirror failed to deliver.

    Workflow:
    1. Load the registration
    2. Skip if the spreadsheet is not configured
    3. Append the row
    4. 2xx: done; 4xx: give up; 5xx/network error: retry

    Args:
        registration_id: ID of the Registration to mirror

    Returns:
        True if the row was appended, False if the task gave up
    """
    try:
        record = Registration.objects.get(id=registration_id)
    except Registration.DoesNotExist:
        logger.error(f"Registration {registration_id} not found in database")
        raise

    if not sheets_client.is_configured():
        logger.warning(f"Registration {registration_id}: spreadsheet not configured, backfill skipped")
        return False

    attempt_no = self.request.retries + 1
    logger.info(f"Registration {registration_id}: spreadsheet backfill attempt #{attempt_no}")

    response = sheets_client.append_row(record)

    if 200 <= response.status_code < 300:
        logger.info(f"Registration {registration_id} backfilled to spreadsheet")
        return True

    if 400 <= response.status_code < 500:
        # 4xx: request will not get better by retrying
        logger.error(
            f"Registration {registration_id}: spreadsheet rejected row with "
            f"{response.status_code}, no retry"
        )
        return False

    logger.warning(
        f"Registration {registration_id}: spreadsheet error {response.status_code}, "
        f"will retry (attempt {attempt_no}/{self.max_retries + 1})"
    )
    raise MirrorServerError(f"Server error: {response.status_code}")
