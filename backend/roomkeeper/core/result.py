"""Result Variant - tagged outcome values returned across the core/shell boundary.

Invariants:
    - A Failure always carries at least one FieldError
    - Success.value is None for unit outcomes (the removal workflow itself)
    - Rejected is only produced by persistence; reason is passed through verbatim

Design Decisions:
    - Expected outcomes are values, not exceptions: the workflow short-circuits
      with plain `return`, and callers dispatch with isinstance()
    - Frozen dataclasses: outcomes are compared by value in tests
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from roomkeeper.core.domain_types import FailureKind, FieldTag

T = TypeVar("T")


@dataclass(frozen=True)
class FieldError:
    """One (field tag, message) pair of a failure."""
    field: str
    message: str


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T | None = None


@dataclass(frozen=True)
class Failure:
    """Structured failure: one kind, one or more field errors."""
    kind: FailureKind
    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.errors:
            raise ValueError("Failure requires at least one FieldError")

    @classmethod
    def of(cls, kind: FailureKind, tag: FieldTag | str, message: str) -> "Failure":
        """Build a single-field failure."""
        tag_value = tag.value if isinstance(tag, FieldTag) else tag
        return cls(kind, (FieldError(tag_value, message),))

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


@dataclass(frozen=True)
class Rejected:
    """Persistence refused the write (concurrency conflict or storage fault)."""
    reason: str
