"""Result types returned by the customer record service."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Tagged success/failure value for read operations.

    A failed read carries the error message instead of masquerading as an
    empty result.
    """

    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "OperationResult[T]":
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        """Return the value, or raise RuntimeError for a failed result."""
        if not self.ok:
            raise RuntimeError(self.error or "operation failed")
        return self.value  # type: ignore[return-value]


class UpdateOutcome(str, Enum):
    """Outcome of a mutation. Truthy only when the change was applied."""

    UPDATED = "updated"
    NOT_FOUND = "not_found"
    FAILED = "failed"

    def __bool__(self) -> bool:
        return self is UpdateOutcome.UPDATED
