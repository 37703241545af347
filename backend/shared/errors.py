"""Error taxonomy shared by every function endpoint.

Each error carries the HTTP status it maps to and the message that is safe to
show a caller. Internal detail goes to the server log, never into
``public_message``.
"""

from http import HTTPStatus


class PortfolioError(Exception):
    """Base class for errors that cross the HTTP boundary as ``{"error": ...}``."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, public_message: str | None = None) -> None:
        self.public_message = public_message or self.default_message
        super().__init__(self.public_message)


class ConfigurationError(PortfolioError):
    """A required secret, credential, or API key is not configured."""

    default_message = "Service not configured"


class Unauthorized(PortfolioError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidResource(PortfolioError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid table"


class InvalidAction(PortfolioError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid action"


class ValidationError(PortfolioError):
    """Malformed or oversized input rejected before any storage or network call."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request body"


class NotFound(PortfolioError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Record not found"


class RateLimited(PortfolioError):
    status_code = HTTPStatus.TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please wait a moment."


class UpstreamRateLimited(PortfolioError):
    status_code = HTTPStatus.TOO_MANY_REQUESTS
    default_message = "AI service is busy. Please try again in a moment."


class UpstreamQuotaExhausted(PortfolioError):
    status_code = HTTPStatus.PAYMENT_REQUIRED
    default_message = "AI credits exhausted. Please add more credits."


class UpstreamFailure(PortfolioError):
    default_message = "Service temporarily unavailable"
