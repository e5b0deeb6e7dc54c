"""
Core error types shared by the handlers and upstream clients.
"""

from .exceptions import (
    AuthenticationError,
    BaseLeadCaptureException,
    ConfigurationError,
    ExternalAPIError,
    ValidationError,
)

__all__ = [
    "BaseLeadCaptureException",
    "ValidationError",
    "AuthenticationError",
    "ExternalAPIError",
    "ConfigurationError",
]
