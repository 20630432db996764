"""
CORS preflight for the AI function routes
"""

import logging
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


class FunctionPreflightMiddleware(BaseHTTPMiddleware):
    """
    Answers every OPTIONS request under ``prefix`` with an empty 200 and the
    function CORS headers, whether or not it carries ``Origin`` and
    ``Access-Control-Request-Method``. Must be added after ``CORSMiddleware``.
    """

    def __init__(self, app, prefix: str = "/api/functions/"):
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" and request.url.path.startswith(self.prefix):
            logger.debug(f"Preflight for {request.url.path}")
            return Response(status_code=200, headers=CORS_HEADERS)
        return await call_next(request)
