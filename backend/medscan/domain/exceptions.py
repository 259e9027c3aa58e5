"""
Domain Exceptions

Custom exceptions for the medication scanning domain.
Raised for input problems detected before any external service is called,
and for storage/identity failures that the caller must see.
"""

from typing import Optional, Dict, Any


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details
        is_recoverable: Whether the operation can be retried
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        is_recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.is_recoverable = is_recoverable

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "is_recoverable": self.is_recoverable,
        }


# =============================================================================
# Input Exceptions
# =============================================================================

class InvalidInputError(DomainException):
    """Invalid input was provided."""

    def __init__(
        self,
        message: str = "Invalid input",
        field_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.details["field"] = field_name


class InvalidImageError(InvalidInputError):
    """The captured image is empty, unreadable or too large."""

    def __init__(self, message: str = "Invalid image data", **kwargs):
        super().__init__(message, field_name="image", **kwargs)


class UnsupportedScanTypeError(InvalidInputError):
    """The scan type is not one of barcode, pill or imprint."""

    def __init__(self, scan_type: str, **kwargs):
        super().__init__(
            f"Unsupported scan type: '{scan_type}'",
            field_name="scan_type",
            is_recoverable=False,
            **kwargs
        )
        self.details["scan_type"] = scan_type


# =============================================================================
# Account Exceptions
# =============================================================================

class AuthenticationRequiredError(DomainException):
    """The operation needs a signed-in user."""

    status_code = 401

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)


class RecordNotFoundError(DomainException):
    """A stored record does not exist (or is not visible to the user)."""

    status_code = 404

    def __init__(self, table: str, record_id: str, **kwargs):
        super().__init__(f"No {table} record with id '{record_id}'", **kwargs)
        self.details["table"] = table
        self.details["id"] = record_id


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageError(DomainException):
    """The storage backend rejected or failed a read/write."""

    status_code = 502

    def __init__(
        self,
        message: str = "Storage operation failed",
        table: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if table:
            self.details["table"] = table


class ConfigurationError(DomainException):
    """A required setting (API key, backend URL) is missing."""

    status_code = 500

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)
        if setting:
            self.details["setting"] = setting
