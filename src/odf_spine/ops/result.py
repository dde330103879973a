"""
Result envelope returned by every operation.

Operations never raise for expected failures. They return an
:class:`OperationResult` whose ``error.code`` the API maps to an HTTP status
and the CLI to an exit code::

    result = get_frame(ctx, "North", "A")
    if result.success:
        entry = result.data
    elif result.error.code == "NOT_FOUND":
        ...

Codes: ``VALIDATION_FAILED``, ``NOT_FOUND``, ``PAYLOAD_TOO_LARGE``,
``STORAGE_ERROR``, ``CONFIG_ERROR``, ``INTERNAL``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from odf_spine.core.errors import ErrorCategory, OdfError

INTERNAL = "INTERNAL"


@dataclass(frozen=True, slots=True)
class OperationError:
    """Why an operation failed.

    ``details`` carries the error context (region, sub, backend, path, ...)
    and is rendered as the ``errors`` list of a problem response.
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False


@dataclass
class OperationResult[T]:
    success: bool
    data: T | None = None
    error: OperationError | None = None
    elapsed_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        return cls(success=True, data=data, elapsed_ms=elapsed_ms)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        error = OperationError(code, message, category, details or {}, retryable)
        return cls(success=False, error=error, elapsed_ms=elapsed_ms)

    @classmethod
    def from_error(cls, exc: OdfError, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Failure carrying an :class:`OdfError`'s code, category and context."""
        return cls.fail(
            exc.code,
            exc.message,
            category=exc.category,
            details=exc.context.to_dict(),
            retryable=exc.retryable,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def internal(cls, action: str, exc: Exception, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Failure for an exception no layer below anticipated."""
        return cls.fail(
            INTERNAL,
            f"Failed to {action}: {exc}",
            category=ErrorCategory.INTERNAL,
            elapsed_ms=elapsed_ms,
        )

    @property
    def code(self) -> str | None:
        return self.error.code if self.error else None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form of the envelope."""
        payload: dict[str, Any] = {"success": self.success}
        if self.success:
            payload["data"] = self.data
        elif self.error is not None:
            payload["error"] = {"code": self.error.code, "message": self.error.message}
            if self.error.details:
                payload["error"]["details"] = self.error.details
        payload["elapsed_ms"] = round(self.elapsed_ms, 2)
        return payload


class Stopwatch:
    __slots__ = ("_started",)

    def __init__(self) -> None:
        self._started = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000


def start_timer() -> Stopwatch:
    return Stopwatch()


__all__ = ["OperationError", "OperationResult", "Stopwatch", "start_timer"]
