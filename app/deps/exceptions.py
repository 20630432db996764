"""
Exception taxonomy shared by the OCR, analysis, chat and translation flows.

Every error carries the HTTP status it maps to and a localized message that
can be shown to the user as-is.
"""

from app.core import localization


class LegalAidError(Exception):
    """Base exception for all handled failures"""

    status_code = 500
    user_message = localization.UNKNOWN_ERROR

    def __init__(self, message: str = None, user_message: str = None):
        self.message = message or self.user_message
        if user_message:
            self.user_message = user_message
        super().__init__(self.message)


class UnsupportedFormatError(LegalAidError):
    """Raised when a file is neither an image nor a PDF"""

    status_code = 415
    user_message = localization.UNSUPPORTED_FORMAT


class EmptyExtractionError(LegalAidError):
    """Raised when OCR produced no text"""

    status_code = 422
    user_message = localization.EMPTY_EXTRACTION


class UpstreamRateLimitedError(LegalAidError):
    """Raised when an upstream AI service answers 429"""

    status_code = 429
    user_message = localization.TOO_MANY_REQUESTS


class UpstreamBillingRequiredError(LegalAidError):
    """Raised when an upstream AI service answers 402"""

    status_code = 402
    user_message = localization.CREDIT_REQUIRED


class UpstreamUnavailableError(LegalAidError):
    """Raised for any other non-2xx answer or transport failure"""

    status_code = 502


class PersistenceFailureError(LegalAidError):
    """Raised when a database read or write fails"""

    status_code = 500
    user_message = localization.SAVE_FAILED


class MissingAPIKeyError(LegalAidError):
    """Raised when an upstream API key is missing or empty"""

    status_code = 500

    def __init__(self, service: str = "AI gateway", env_var: str = "AI_GATEWAY_API_KEY"):
        super().__init__(f"{service} API key is not configured. Please set the {env_var} environment variable")


class InvalidAPIKeyError(LegalAidError):
    """Raised when an upstream API key is rejected"""

    status_code = 500

    def __init__(self, service: str = "AI gateway"):
        super().__init__(f"{service} API key is invalid or authentication failed. Please verify your API key configuration")
