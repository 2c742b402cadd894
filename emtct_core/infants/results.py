# emtct_core/infants/results.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from emtct_core.infants.errors import InfantServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a repository call: either a value or the reason it was refused.

    Invariants:
        - a failed Result always carries an InfantServiceError
        - a failure may still carry a value (e.g. PersistenceFailed: the change is
          visible in memory but was not saved)
    """
    value: Optional[T] = None
    error: Optional[InfantServiceError] = None

    def __post_init__(self):
        if self.error is not None and not isinstance(self.error, InfantServiceError):
            raise ValueError("error must be an InfantServiceError.")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: InfantServiceError, value: Optional[T] = None) -> "Result[T]":
        if error is None:
            raise ValueError("A failed result must include the error. No silent denials.")
        return cls(value=value, error=error)
