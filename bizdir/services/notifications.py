"""Outbound notifications — signed HTTP POSTs to the notification service.

Email rendering and delivery live behind ``settings.notification_url``; this
module only reports events to it.
"""

import json
import logging

import httpx

from bizdir.core.config import get_settings
from bizdir.core.security import sign_payload

logger = logging.getLogger(__name__)

BUSINESS_VERIFIED = "business.verified"


async def send_notification(event_type: str, payload: dict) -> bool:
    """POST an event to the notification service. Never raises.

    Returns True when the service accepted the event.
    """
    settings = get_settings()
    if not settings.notification_url:
        logger.info("Notifications disabled, dropping %s", event_type)
        return False

    body = json.dumps({"event": event_type, "data": payload}, default=str)
    headers = {
        "Content-Type": "application/json",
        "X-Bizdir-Event": event_type,
    }
    if settings.notification_secret:
        headers["X-Bizdir-Signature"] = sign_payload(settings.notification_secret, body.encode())

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(settings.notification_url, content=body, headers=headers)
        if not resp.is_success:
            logger.warning(
                "Notification %s rejected with HTTP %s", event_type, resp.status_code,
            )
        return resp.is_success
    except Exception:
        logger.warning("Notification delivery failed for %s", event_type)
        return False
