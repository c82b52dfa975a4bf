"""
Request Middleware

Correlation ID: every request gets an ID that is stamped on its log lines,
so the calls made while assembling one flow can be traced together.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.shared.core.logging import set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns a correlation ID to each request.

    - Reuses an incoming X-Request-ID header when the caller sends one
    - Otherwise generates req-xxxxxxxx
    - Echoes the ID back in the X-Request-ID response header
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = set_correlation_id(request.headers.get(REQUEST_ID_HEADER))

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response
