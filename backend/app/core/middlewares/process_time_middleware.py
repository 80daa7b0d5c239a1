import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.config import settings

logger = logging.getLogger(__name__)


class ProcessingTimeMiddleware(BaseHTTPMiddleware):
    """Adds X-Process-Time-MS to every response and logs slow requests."""

    def __init__(self, app: ASGIApp, slow_request_ms: float | None = None):
        super().__init__(app)
        self.slow_request_ms = (
            slow_request_ms
            if slow_request_ms is not None
            else settings.SLOW_REQUEST_MS
        )

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        processing_time = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers["X-Process-Time-MS"] = str(processing_time)

        if self.slow_request_ms and processing_time > self.slow_request_ms:
            logger.warning(
                "Slow request %s %s took %sms",
                request.method,
                request.url.path,
                processing_time,
            )

        return response
