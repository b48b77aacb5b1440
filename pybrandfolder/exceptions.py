"""Exceptions raised by the Brandfolder client."""

from typing import Optional


class BrandfolderError(Exception):
    """Base exception for all Brandfolder client failures.

    Attributes:
        status: HTTP status code of the failed call, or 0 if none applies
        message: Human-readable description of the failure
    """

    def __init__(self, message: str = "", status: int = 0):
        super().__init__(message)
        self.message = message
        self.status = status


class BrandfolderConfigError(BrandfolderError):
    """Raised when the client is missing required configuration."""


class BrandfolderValidationError(BrandfolderError):
    """Raised when an argument is outside the values the API accepts."""


class BrandfolderNetworkError(BrandfolderError):
    """Raised when the request could not be sent or no response arrived."""


class BrandfolderInvalidResponseError(BrandfolderError):
    """Raised when a successful response body cannot be decoded as JSON."""


class BrandfolderAPIError(BrandfolderError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(
        self,
        message: str = "",
        status: int = 0,
        reason: Optional[str] = None,
    ):
        super().__init__(message, status)
        self.reason = reason


class BrandfolderAuthenticationError(BrandfolderAPIError):
    """Raised on 401 responses."""


class BrandfolderPermissionError(BrandfolderAPIError):
    """Raised on 403 responses."""


class BrandfolderNotFoundError(BrandfolderAPIError):
    """Raised on 404 responses."""


class BrandfolderRateLimitError(BrandfolderAPIError):
    """Raised on 429 responses. The client does not retry."""
