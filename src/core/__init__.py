"""Core infrastructure components."""

from .error_handling import (
    BaseError,
    BirthStateError,
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    ResourceError,
    ValidationError,
)

__all__ = [
    "BaseError",
    "BirthStateError",
    "ConfigurationError",
    "ErrorCategory",
    "ErrorSeverity",
    "ResourceError",
    "ValidationError",
]
