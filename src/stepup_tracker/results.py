"""Explicit success/failure results returned across the storage boundary."""
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a store or repository operation.

    ``value`` is always usable: on failure it carries the default the caller
    would have seen from an empty store, so code that only wants the data can
    read it directly, while code that cares can check ``ok`` and ``error``.
    """

    ok: bool
    value: T
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str, default: Any = None) -> "Result[Any]":
        return cls(ok=False, value=default, error=reason)
