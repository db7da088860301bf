"""
NoteBoard — Request Logging Middleware
=======================================

What:  One log line per HTTP request with method, path, status and duration.
How:   Measures with time.perf_counter around call_next; the level follows
       the status (5xx ERROR, 4xx WARNING, otherwise INFO).
Who:   Applied to every request except /health and signed blob downloads.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, client IP, request ID, session
    ❌ Don't log: form values, file contents, query strings (signed URLs
       carry their token in the query)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from noteboard.middleware.request_id import request_id_var

logger = logging.getLogger("noteboard.access")

QUIET_PREFIXES = ("/health", "/storage/")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        session_id = request.scope.get("session", {}).get("board", "")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] session=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            session_id[:8],
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
