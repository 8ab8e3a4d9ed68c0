"""
Notification transport: sends VK app notifications to participants.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    succeeded: bool
    error: Optional[str] = None


def send_notification(recipient_id: str, message: str) -> httpx.Response:
    """
    Calls VK notifications.sendMessage for a single recipient.

    Args:
        recipient_id: VK user id of the participant
        message: Notification text

    Returns:
        HTTP response from the VK API

    Raises:
        httpx.HTTPError: On network/timeout errors
    """
    url = f"{settings.VK_API_URL.rstrip('/')}/notifications.sendMessage"
    token = settings.VK_SERVICE_TOKEN
    logger.debug("VK service token=%s", token)

    data = {
        'access_token': token,
        'v': settings.VK_API_VERSION,
        'user_ids': recipient_id,
        'message': message,
    }

    logger.info(f"Sending notification to {recipient_id}")

    try:
        response = httpx.post(
            url,
            data=data,
            timeout=settings.NOTIFY_TIMEOUT
        )
        logger.info(f"VK API response for {recipient_id}: {response.status_code}")
        return response

    except httpx.TimeoutException as e:
        logger.error(f"Timeout notifying {recipient_id}: {e}")
        raise
    except httpx.ConnectError as e:
        logger.error(f"Connection error notifying {recipient_id}: {e}")
        raise
    except httpx.HTTPError as e:
        logger.error(f"HTTP error notifying {recipient_id}: {e}")
        raise


def _interpret(response: httpx.Response) -> DeliveryResult:
    if not (200 <= response.status_code < 300):
        return DeliveryResult(False, f"HTTP {response.status_code}")

    try:
        body = response.json()
    except ValueError:
        return DeliveryResult(False, "Malformed response body")

    if not isinstance(body, dict):
        return DeliveryResult(False, "Malformed response body")

    error = body.get('error')
    if error:
        if isinstance(error, dict):
            return DeliveryResult(
                False,
                f"VK error {error.get('error_code')}: {error.get('error_msg')}"
            )
        return DeliveryResult(False, str(error))

    # notifications.sendMessage answers with one status entry per user
    results = body.get('response')
    if isinstance(results, list):
        for entry in results:
            if isinstance(entry, dict) and entry.get('status') is False:
                reason = entry.get('error', {})
                if isinstance(reason, dict):
                    return DeliveryResult(False, reason.get('description') or 'Not delivered')
                return DeliveryResult(False, 'Not delivered')

    return DeliveryResult(True)


def notify(recipient_id: str, message: str) -> DeliveryResult:
    """
    Deliver one notification, reporting failure instead of raising.
    """
    try:
        response = send_notification(recipient_id, message)
    except httpx.HTTPError as e:
        return DeliveryResult(False, f"{type(e).__name__}: {e}")

    result = _interpret(response)
    if not result.succeeded:
        logger.warning(f"Notification to {recipient_id} failed: {result.error}")
    return result
