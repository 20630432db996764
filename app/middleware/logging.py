"""
Structured logging middleware
"""

import time
import logging
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from app.middleware.rate_limiting import get_client_ip

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request and response with a correlation id.

    An incoming ``X-Correlation-ID`` is reused; otherwise one is generated.
    The id is stored on ``request.state`` for the error handler and echoed
    back in the response header.
    """

    def __init__(self, app, excluded_paths: list = None):
        super().__init__(app)
        self.excluded_paths = excluded_paths or [
            "/healthz",
            "/readyz",
            "/docs",
            "/openapi.json",
            "/redoc"
        ]

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        if request.url.path in self.excluded_paths:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        start_time = time.time()
        logger.info(
            "Request received",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": get_client_ip(request),
                "user_agent": request.headers.get("User-Agent", "unknown"),
                "content_length": request.headers.get("Content-Length"),
                "event_type": "request"
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error_type": type(e).__name__,
                    "process_time_ms": round((time.time() - start_time) * 1000, 2),
                    "event_type": "error"
                },
                exc_info=True
            )
            raise

        self._log_response(request, response, correlation_id, time.time() - start_time)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    def _log_response(self, request: Request, response: Response, correlation_id: str, process_time: float):
        logger.info(
            "Response sent",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2),
                "event_type": "response"
            }
        )
