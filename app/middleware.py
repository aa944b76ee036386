import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app.access")

REQUEST_ID_HEADER = "X-Request-Id"

# polled by load balancers; only logged at DEBUG
QUIET_PATHS = ("/health",)


def _actor(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        return "anonymous"
    return f"{getattr(request.state, 'user_role', '?')}:{user_id}"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request, tagged with the caller resolved by get_current_user."""

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request.state.request_id
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            if request.url.path in QUIET_PATHS and status_code < 500:
                level = logging.DEBUG
            elif status_code >= 500:
                level = logging.WARNING
            else:
                level = logging.INFO
            logger.log(
                level,
                "%s %s -> %s in %.1fms actor=%s rid=%s",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
                _actor(request),
                request.state.request_id,
            )
