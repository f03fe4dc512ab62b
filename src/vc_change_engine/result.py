"""
Success/failure values returned by every engine operation.

Engine components never let exceptions escape to their callers. Instead
each operation returns either :class:`Ok` wrapping the value or
:class:`Err` wrapping an :class:`AppError`. Callers branch on
``result.ok`` (or ``result.kind``) before touching ``value``/``error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union


T = TypeVar("T")


class ErrorCode:
    """Error codes surfaced in :attr:`AppError.code`."""

    NO_CHANGES = "NO_CHANGES"
    NO_GROUPS_APPROVED = "NO_GROUPS_APPROVED"
    GET_CHANGES_FAILED = "GET_CHANGES_FAILED"
    STAGE_FAILED = "STAGE_FAILED"
    COMMIT_FAILED = "COMMIT_FAILED"
    BATCH_COMMIT_ERROR = "BATCH_COMMIT_ERROR"
    SMART_COMMIT_ERROR = "SMART_COMMIT_ERROR"
    INBOUND_ANALYSIS_ERROR = "INBOUND_ANALYSIS_ERROR"
    INBOUND_DIFF_PARSE_ERROR = "INBOUND_DIFF_PARSE_ERROR"
    CONFLICT_DETECTION_ERROR = "CONFLICT_DETECTION_ERROR"
    GIT_OPERATION_FAILED = "GIT_OPERATION_FAILED"
    GIT_UNAVAILABLE = "GIT_UNAVAILABLE"
    GIT_STATUS_ERROR = "GIT_STATUS_ERROR"
    GIT_COMMIT_ERROR = "GIT_COMMIT_ERROR"
    INVALID_PARAMS = "INVALID_PARAMS"


@dataclass(frozen=True)
class AppError:
    """Structured error payload.

    Attributes
    ----------
    code : str
        Machine readable error code, see :class:`ErrorCode`.
    message : str
        Human readable description.
    details : Any, optional
        Underlying cause, e.g. the provider's own :class:`AppError` or an
        exception instance.
    context : str, optional
        Label of the operation that produced the error.
    """

    code: str
    message: str
    details: Any = None
    context: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def kind(self) -> str:
        return "ok"


@dataclass(frozen=True)
class Err:
    """Failed result."""

    error: AppError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        return "err"


Result = Union[Ok[T], Err]


def success(value: T = None) -> Ok[T]:
    return Ok(value)


def failure(
    code: str,
    message: str,
    details: Any = None,
    context: Optional[str] = None,
) -> Err:
    return Err(AppError(code=code, message=message, details=details, context=context))
