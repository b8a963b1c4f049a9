"""Explicit success/failure values returned by public service operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    EXTRACTION = "extraction"
    GENERATION = "generation"
    PARSE = "parse"
    TIMEOUT = "timeout"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or an error kind with a message.

    A failed result may still carry a value when the operation produced a
    degraded but usable output (e.g. a fallback verdict).
    """

    value: T | None = None
    error_kind: ErrorKind | None = None
    error: str = ""
    degraded: bool = False

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T, *, degraded: bool = False) -> "Result[T]":
        return cls(value=value, degraded=degraded)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        error: str,
        value: T | None = None,
    ) -> "Result[T]":
        return cls(value=value, error_kind=kind, error=error, degraded=value is not None)

    def unwrap(self) -> T:
        """Return the value or raise ValueError when there is none."""
        if self.value is None:
            raise ValueError(f"Result has no value ({self.error_kind}): {self.error}")
        return self.value
