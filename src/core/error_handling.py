"""
Error hierarchy for the roguelike birth client.

Birth itself never raises for user input: stepping back, restarting and
quitting are modeled transitions. The errors here cover faults that must
fail fast instead: broken game data, malformed prior-character records and
state machine misuse.
"""

import time
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    CRITICAL = auto()  # Birth cannot continue
    HIGH = auto()  # A collaborator failed
    MEDIUM = auto()  # Recoverable errors
    LOW = auto()  # Rejected input data
    INFO = auto()  # Informational errors for debugging


class ErrorCategory(Enum):
    """Error categories for classification and routing."""

    SYSTEM = auto()  # State machine misuse
    VALIDATION = auto()  # Input validation errors
    CONFIGURATION = auto()  # Catalog and settings errors
    RESOURCE = auto()  # Input/output collaborator errors


class BaseError(Exception):
    """Base exception class with enhanced error information."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """
        Initialize base error with comprehensive metadata.

        Args:
            message: Human-readable error message
            severity: Error severity level
            category: Error category for classification
            error_code: Unique error code for tracking
            context: Additional context information
            recoverable: Whether error is recoverable
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.recoverable = recoverable
        self.timestamp = datetime.now(timezone.utc)

    def _generate_error_code(self) -> str:
        """Generate unique error code based on category and timestamp."""
        timestamp = int(time.time() * 1000) % 100000
        return f"{self.category.name[:3]}-{self.severity.name[:3]}-{timestamp}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.name,
            "category": self.category.name,
            "context": self.context,
            "recoverable": self.recoverable,
            "timestamp": self.timestamp.isoformat(),
        }


class BirthStateError(BaseError):
    """A birth stage was entered without the draft fields it depends on."""

    def __init__(self, message: str, stage: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        if stage:
            context["stage"] = stage
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.SYSTEM,
            context=context,
            recoverable=False,
            **kwargs,
        )


class ValidationError(BaseError):
    """Input validation errors."""

    def __init__(
        self, message: str, field: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
            recoverable=False,
            **kwargs,
        )


class ConfigurationError(BaseError):
    """Game data or settings errors."""

    def __init__(self, message: str, config_key: str, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        context["config_key"] = config_key
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            context=context,
            recoverable=False,
            **kwargs,
        )


class ResourceError(BaseError):
    """Input or output collaborator errors."""

    def __init__(self, message: str, resource_type: str, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        context["resource_type"] = resource_type
        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.RESOURCE,
            context=context,
            **kwargs,
        )
