"""
Error kinds and the result type returned by the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class StorageError(Exception):
    """Raised by repositories when the underlying storage engine fails."""


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    PERSISTENCE_REJECTED = "persistence_rejected"
    STORAGE_FAILURE = "storage_failure"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a service call: either a value or an error kind with an
    optional human-readable detail.
    """

    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    detail: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        error: ErrorKind,
        detail: Optional[str] = None,
        error_type: Optional[str] = None,
    ) -> "Result[T]":
        return cls(error=error, detail=detail, error_type=error_type)
