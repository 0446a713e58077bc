"""
NoteAssist Backend — Request ID Middleware
============================================

What:  Assigns a correlation ID to each incoming request and echoes it back.
Why:   Every log line of one request (auth, store, provider call) shares the
       same ID, and clients can quote it from an error response.
How:   Uses the client's X-Request-ID when present, otherwise a short UUID;
       stores it in a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Reuse X-Request-ID from the client when sent
        2. Otherwise generate an 8-character UUID prefix
        3. Store in ContextVar (loggers, services) and request.state (handlers)
        4. Add to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
