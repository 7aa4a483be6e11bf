from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")

# Error code used when no HTTP response was obtained at all
NO_RESPONSE_CODE = "-1"


class NovaClientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NovaConfigError(NovaClientError):
    """Missing or invalid API configuration."""


class NovaNetworkError(NovaClientError):
    """Network/timeout/connection related errors."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.method = method
        self.path = path


@dataclass(frozen=True)
class ErrorDescription:
    """Human-readable error message plus the status code it came with."""

    message: str
    code: str

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error: ErrorDescription


Result = Union[Success[T], Failure]
