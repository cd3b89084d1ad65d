"""Per-request access log."""

from __future__ import annotations

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("skybook.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration for each HTTP request."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "-"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s status=500 duration_ms=%s client_ip=%s",
                request.method, request.url.path, self._elapsed_ms(start_time), client_ip,
            )
            raise

        logger.info(
            "%s %s status=%s duration_ms=%s client_ip=%s",
            request.method, request.url.path, response.status_code, self._elapsed_ms(start_time), client_ip,
        )
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)
