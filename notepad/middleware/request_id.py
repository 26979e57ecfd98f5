"""
Note Pad API: Request ID Middleware
=====================================

What:  Assigns a correlation ID to each request and echoes it in the response.
Why:   Log lines, error bodies and the X-Request-ID response header all carry
       the same ID, so a client-reported failure can be found in the logs.
How:   Reuses an incoming X-Request-ID header or generates a short UUID,
       stores it in a ContextVar and on request.state. Exceptions no handler
       claimed are rendered here as a 500 so they carry the ID too.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from notepad.schemas.note import ErrorResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate an 8-character ID (enough for log correlation)
        3. Store it in request_id_var and request.state.request_id
        4. Add it to the response headers
        5. Turn an unhandled exception into a generic 500 carrying the ID
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            body = ErrorResponse(
                error="internal error",
                message="An unexpected error occurred.",
                request_id=rid,
            )
            response = JSONResponse(status_code=500, content=body.model_dump())
        response.headers[REQUEST_ID_HEADER] = rid
        return response
