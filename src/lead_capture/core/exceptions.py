"""
Custom exception classes for the lead capture functions.
"""

from typing import Any, Dict, Optional


class BaseLeadCaptureException(Exception):
    """Base exception for all lead capture errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseLeadCaptureException):
    """Raised when an inbound request fails validation."""
    pass


class AuthenticationError(BaseLeadCaptureException):
    """Raised when the OAuth token exchange fails."""
    pass


class ExternalAPIError(BaseLeadCaptureException):
    """Raised when external API calls fail."""
    pass


class ConfigurationError(BaseLeadCaptureException):
    """Raised when configuration is invalid."""
    pass


# Specific error factory functions
def create_validation_error(message: str, field: str = None) -> ValidationError:
    """Create a validation error with context."""
    details = {}
    if field:
        details["field"] = field

    return ValidationError(
        message=message,
        error_code="VALIDATION_FAILED",
        details=details
    )


def create_authentication_error(status_code: int, reason: str = "") -> AuthenticationError:
    """Create an error for a rejected client-credentials exchange."""
    return AuthenticationError(
        message="Failed to get Kajabi access token",
        error_code="AUTHENTICATION_FAILED",
        details={"status_code": status_code, "reason": reason}
    )


def create_external_api_error(api_name: str, status_code: int, reason: str) -> ExternalAPIError:
    """Create an external API error."""
    return ExternalAPIError(
        message=f"External API '{api_name}' failed: {reason}",
        error_code="EXTERNAL_API_FAILED",
        details={"api_name": api_name, "status_code": status_code, "reason": reason}
    )
