"""Custom exceptions for streamgen.

Provides a hierarchy of exceptions for the fatal and reportable error types.
All streamgen exceptions inherit from StreamgenException.
"""

from typing import Any, Dict, Optional


class StreamgenException(Exception):
    """Base exception for all streamgen errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: str = "STREAMGEN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logs."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidConfigurationError(StreamgenException):
    """Raised when the run configuration or schema cannot be used.

    Covers a key field missing from the schema and field types that cannot
    be widened to a nullable row schema.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        if field_name is not None:
            details["field_name"] = field_name
        super().__init__(message, code="CONFIG_ERROR", details=details)


class GeneratorContractViolation(StreamgenException):
    """Raised when the record generator returns something that is not a record."""

    def __init__(self, message: str, returned_type: str):
        super().__init__(
            message,
            code="GENERATOR_CONTRACT",
            details={"returned_type": returned_type},
        )


class TokenExhaustionError(StreamgenException):
    """Raised when no session token is left to sustain the session policy."""

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        details: Dict[str, Any] = {"token": token}
        if field_name is not None:
            details["field_name"] = field_name
        super().__init__(message, code="TOKEN_EXHAUSTED", details=details)


class EmptyStateError(StreamgenException):
    """Raised when a selection is requested from an empty session set."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="EMPTY_STATE", details=details)


class DeliveryError(StreamgenException):
    """A single message could not be delivered to the sink.

    Never raised by the delivery loop; instances are handed to the
    delivery callback so failures can be reported per message.
    """

    def __init__(
        self,
        message: str,
        topic: str,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["topic"] = topic
        details["key"] = key
        super().__init__(message, code="DELIVERY_ERROR", details=details)
