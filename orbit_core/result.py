# orbit_core/result.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from orbit_core.errors import OrbitError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of an identity or store write operation.

    Exactly one of `value` / `error` is meaningful, selected by `ok`.
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[OrbitError] = None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: OrbitError) -> "Result":
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        if not self.ok:
            raise self.error
        return self.value
