"""
MarkNote — Access Log Middleware
=================================

What:  One `marknote.access` log line per request:

           GET /notes?search=ruby 200 3.1ms from 127.0.0.1

How:   Times the downstream call and picks the level from the status class
       (5xx ERROR, 4xx WARNING, else INFO). The request ID is added to the
       record by RequestIdLogFilter, since this runs inside RequestIDMiddleware.

Form bodies are never logged; they hold note content. Health probes are
skipped entirely.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("marknote.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        client = request.client.host if request.client else "unknown"

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms from %s",
            request.method,
            target,
            response.status_code,
            elapsed_ms,
            client,
        )
        return response
