"""
Call Outcome Value Object

Result of a single call to an external service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class OutcomeStatus(Enum):
    """How an external call ended."""

    SUCCESS = "success"   # Usable, non-empty value
    EMPTY = "empty"       # Service answered but had nothing
    ERROR = "error"       # Transport failure, error payload or malformed response


@dataclass(frozen=True)
class CallOutcome(Generic[T]):
    """
    Immutable outcome of a boundary call.

    Adapters never raise for service failures; they return an outcome and
    the caller decides what an empty or failed call means.

    Attributes:
        status: SUCCESS, EMPTY or ERROR
        value: The payload (only meaningful on SUCCESS)
        reason: Diagnostic for EMPTY/ERROR outcomes
    """

    status: OutcomeStatus
    value: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "CallOutcome[T]":
        return cls(OutcomeStatus.SUCCESS, value=value)

    @classmethod
    def empty(cls, reason: str = "no results") -> "CallOutcome[T]":
        return cls(OutcomeStatus.EMPTY, reason=reason)

    @classmethod
    def error(cls, reason: str) -> "CallOutcome[T]":
        return cls(OutcomeStatus.ERROR, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is OutcomeStatus.ERROR

    def value_or(self, default: T) -> T:
        """Return the value on success, otherwise ``default``."""
        if self.is_success and self.value is not None:
            return self.value
        return default

    def __str__(self) -> str:
        if self.is_success:
            return "CallOutcome(success)"
        return f"CallOutcome({self.status.value}: {self.reason})"
