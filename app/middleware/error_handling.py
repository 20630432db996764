"""
Error handling middleware
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from app.core import localization
from app.core.config import settings
from app.deps.exceptions import LegalAidError
from app.deps.utils import sanitize_api_key

logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    402: "PAYMENT_REQUIRED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    415: "UNSUPPORTED_MEDIA_TYPE",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMIT_EXCEEDED",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


def error_code(status_code: int) -> str:
    return ERROR_CODES.get(status_code, "UNKNOWN_ERROR")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Turns exceptions that escape a route into JSON error bodies.

    ``LegalAidError`` keeps its status and localized message; anything else
    becomes a 500 with the generic message.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except LegalAidError as e:
            return self._handle_legal_aid_error(e, request)
        except Exception as e:
            return self._handle_unexpected_exception(e, request)

    def _handle_legal_aid_error(self, exc: LegalAidError, request: Request) -> JSONResponse:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {sanitize_api_key(exc.message)}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.user_message,
                "error_code": error_code(exc.status_code),
                "correlation_id": self._correlation_id(request),
                "path": request.url.path
            }
        )

    def _handle_unexpected_exception(self, exc: Exception, request: Request) -> JSONResponse:
        logger.error(f"Unexpected exception: {type(exc).__name__} - {sanitize_api_key(str(exc))}", exc_info=True)

        error_response = {
            "error": localization.UNKNOWN_ERROR,
            "error_code": "INTERNAL_ERROR",
            "correlation_id": self._correlation_id(request),
            "path": request.url.path
        }

        # Include error details in development mode
        if settings.debug:
            error_response["details"] = {
                "exception_type": type(exc).__name__,
                "exception_message": sanitize_api_key(str(exc))
            }

        return JSONResponse(status_code=500, content=error_response)

    def _correlation_id(self, request: Request) -> str:
        return getattr(request.state, "correlation_id", None) or request.headers.get("X-Correlation-ID", "unknown")
