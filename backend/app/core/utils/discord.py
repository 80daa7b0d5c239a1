from datetime import datetime, timezone
import logging
import traceback

import httpx
from fastapi import Request

from app.config import settings

logger = logging.getLogger(__name__)


async def notify_error(request: Request, exc: Exception, track_id: str):
    """
    Forward an unhandled error to the configured Discord webhook, if any.
    """
    if not settings.DISCORD_ERROR_WEBHOOK:
        return
    error_details = {
        "track_id": track_id,
        "path": request.url.path,
        "method": request.method,
        "traceback": "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
    }

    await send_discord_notification(error_details)


async def send_discord_notification(error_details: dict):
    """
    Post the traceback as a text attachment. Delivery is best effort: a
    failure is logged, never raised back into the error handler.
    """
    if not settings.DISCORD_ERROR_WEBHOOK:
        return

    timestamp = datetime.now(timezone.utc).isoformat()
    error_content = f"""
============================ ERROR DETAILS ============================

Timestamp: {timestamp}
Track ID: {error_details.get("track_id", "N/A")}
Path: {error_details.get("path", "N/A")}
Method: {error_details.get("method", "N/A")}

============================== TRACEBACK ==============================

{error_details.get("traceback", "")}

=======================================================================
"""
    files = {
        "file": (
            "traceback.txt",
            error_content.encode("utf-8"),
            "text/plain",
        ),
    }

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(
                settings.DISCORD_ERROR_WEBHOOK,
                data={"content": "Internal Server Error Detected"},
                files=files,
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(
            "Discord notification for %s failed: %s",
            error_details.get("track_id"),
            e,
        )
