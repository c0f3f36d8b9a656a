"""HTTP middleware for security headers and last-resort error handling."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.api.errors import error_response

logger = logging.getLogger(__name__)

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "base-uri 'self'; "
    "font-src 'self' https: data:; "
    "form-action 'self'; "
    "frame-ancestors 'self'; "
    "img-src 'self' data:; "
    "object-src 'none'; "
    "script-src 'self'; "
    "style-src 'self' https: 'unsafe-inline'"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses."""

    def __init__(self, app, enable_hsts: bool = False):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        response.headers["Origin-Agent-Cluster"] = "?1"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-DNS-Prefetch-Control"] = "off"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Permitted-Cross-Domain-Policies"] = "none"

        # Only meaningful when served over HTTPS
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn exceptions no handler claimed into a 400 error body.

    Installed innermost so the response still passes through the security
    headers, compression and CORS middleware.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
            return error_response(400, type(exc).__name__, str(exc))
