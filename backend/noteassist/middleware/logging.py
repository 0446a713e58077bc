"""
NoteAssist Backend — Request Logging Middleware
=================================================

What:  One structured access-log line per HTTP request.
How:   Logs method, path, status, duration, request ID, client IP and the
       verified user id (when the route authenticated one) on the
       `noteassist.access` logger, at a level chosen by status class.

What we log vs what we DON'T log (privacy):
    Log:        method, path, status, duration, IP, request ID, user id (`sub`)
    Don't log:  request bodies (note text), Authorization header (ID tokens)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from noteassist.middleware.request_id import request_id_var

logger = logging.getLogger("noteassist.access")

QUIET_PATHS = {"/health", "/api/test"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO.

    Health and liveness probes are not logged; they run every few seconds.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)
        # Set by noteassist.auth once the bearer token has been verified
        user = getattr(request.state, "user", None)
        user_id = user.id if user is not None else "-"

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
            "%s %s %d %.1fms [%s] from %s user=%s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            user_id,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "user_id": user_id,
            },
        )

        return response
