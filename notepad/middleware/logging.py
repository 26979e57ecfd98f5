"""
Note Pad API: Request Logging Middleware
==========================================

What:  One access-log line per HTTP request.
How:   Times the downstream call and logs method, path, status, duration,
       request ID and client IP. The level follows the status class:
       5xx → ERROR, 4xx → WARNING, everything else → INFO.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, IP, request ID
    ❌ Don't log: request bodies (note content belongs to the user)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notepad.middleware.request_id import request_id_var

logger = logging.getLogger("notepad.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    Health probes are skipped; they arrive every few seconds and carry no
    information.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path.endswith("/healthcheck"):
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
