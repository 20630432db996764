"""
Rate limiting middleware for the AI function routes
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from app.core import localization
from app.services.rate_limiter import rate_limiter, RateLimiter

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Client address, honouring proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP in the chain
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


class RateLimitingMiddleware(BaseHTTPMiddleware):
    """
    Limits requests to paths under ``limited_prefixes`` per client IP
    """

    def __init__(self, app, limited_prefixes: list = None, limiter: RateLimiter = None):
        super().__init__(app)
        self.limited_prefixes = limited_prefixes or ["/api/functions/"]
        self.limiter = limiter or rate_limiter

    async def dispatch(self, request: Request, call_next):
        if not self._is_limited_path(request.url.path):
            return await call_next(request)

        # CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        client_ip = get_client_ip(request)
        decision = self.limiter.check(client_ip)

        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for client {client_ip} on {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"error": localization.TOO_MANY_REQUESTS},
                headers=decision.headers()
            )

        response = await call_next(request)
        for header, value in decision.headers().items():
            response.headers[header] = value
        return response

    def _is_limited_path(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.limited_prefixes)
