"""
Keep API — Access Log Middleware
==================================

One line per request on the "keep_api.access" logger:

    PATCH /admin/page/3 200 4.2ms rid=1f2e3d4c user=7 ip=10.0.0.5

`user` is filled only when the AuthGate accepted a token for the request
(request.state.user_id); public and rejected requests log "user=-".

Severity follows the outcome: 5xx ERROR, 401/403 on /admin WARNING with an
"auth" tag, other 4xx WARNING, the rest INFO.

Request bodies are never logged (/register and /login carry passwords),
neither is the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from keep_api.middleware.request_id import request_id_var

logger = logging.getLogger("keep_api.access")

ADMIN_PREFIX = "/admin"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    # Polled by probes
    SKIPPED_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        status = response.status_code
        user_id = getattr(request.state, "user_id", None)
        client_ip = request.client.host if request.client else "-"
        rid = request_id_var.get("")
        denied = path.startswith(ADMIN_PREFIX) and status in (401, 403)

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms rid=%s user=%s ip=%s%s",
            request.method,
            path,
            status,
            elapsed_ms,
            rid or "-",
            user_id if user_id is not None else "-",
            client_ip,
            " auth" if denied else "",
            extra={
                "request_id": rid,
                "user_id": user_id,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
