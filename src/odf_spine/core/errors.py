"""
Exceptions raised by odf-spine.

Normalization never raises on malformed frame *data*: bad field values
degrade to defaults. The types here cover the remaining failures: a
request that cannot be served as asked, a lookup that misses, an oversized
body, a broken store and bad configuration.

Each error carries:

- ``code``: the string the operations layer reports
  (``VALIDATION_FAILED``, ``NOT_FOUND``, ``PAYLOAD_TOO_LARGE``,
  ``STORAGE_ERROR``, ``CONFIG_ERROR``, ``INTERNAL``)
- ``category``: a coarser :class:`ErrorCategory` used in logs
- ``context``: the frame coordinates and store details in play
- ``cause``: the underlying exception, also set as ``__cause__``

Examples:
    >>> err = NotFoundError("Not found").with_context(region="North", sub="A")
    >>> err.context.to_dict()
    {'region': 'North', 'sub': 'A'}

    >>> try:
    ...     open("/nonexistent/data.json")
    ... except OSError as exc:
    ...     err = StorageError("Failed to read data file", cause=exc)
    >>> err.code
    'STORAGE_ERROR'

Hierarchy::

    OdfError
     ├── ValidationError        VALIDATION_FAILED
     ├── NotFoundError          NOT_FOUND
     ├── PayloadTooLargeError   PAYLOAD_TOO_LARGE
     ├── ConfigError            CONFIG_ERROR
     └── StorageError           STORAGE_ERROR
          └── DatabaseError     STORAGE_ERROR (category DATABASE)

Tags:
    errors, error-context, odf-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    PAYLOAD = "PAYLOAD"
    STORAGE = "STORAGE"
    DATABASE = "DATABASE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Where an error happened.

    Frame coordinates and store details get their own slots; any other
    keyword given to :meth:`OdfError.with_context` lands in ``metadata``.
    """

    region: str | None = None
    sub: str | None = None
    storage_key: str | None = None
    backend: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def slot_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "metadata")

    def set(self, key: str, value: Any) -> None:
        if key in self.slot_names():
            setattr(self, key, value)
        else:
            self.metadata[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Populated slots followed by metadata; unset slots are omitted."""
        out = {name: getattr(self, name) for name in self.slot_names() if getattr(self, name) is not None}
        out.update(self.metadata)
        return out


class OdfError(Exception):
    """Root of the odf-spine exception tree.

    Subclasses pick their ``code`` and ``default_category``; ``retryable``
    is False unless a subclass or caller says otherwise.
    """

    code: str = "INTERNAL"
    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category if category is not None else self.default_category
        self.retryable = self.default_retryable if retryable is None else retryable
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **values: Any) -> OdfError:
        """Attach context in place and return ``self`` so it can be raised inline."""
        for key, value in values.items():
            self.context.set(key, value)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Log-friendly representation."""
        out: dict[str, Any] = {
            "error_type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if context := self.context.to_dict():
            out["context"] = context
        if self.cause is not None:
            out["cause"] = str(self.cause)
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code})"


class ValidationError(OdfError):
    """The request is unusable as given: missing region or sub, ports that
    are not a list, a roster that is not a list of names."""

    code = "VALIDATION_FAILED"
    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, field: str | None = None, value: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.field:
            out["field"] = self.field
        if self.value is not None:
            out["value"] = repr(self.value)
        return out


class NotFoundError(OdfError):
    code = "NOT_FOUND"
    default_category = ErrorCategory.NOT_FOUND


class PayloadTooLargeError(OdfError):
    code = "PAYLOAD_TOO_LARGE"
    default_category = ErrorCategory.PAYLOAD

    def __init__(self, limit: int, received: int | None = None, message: str | None = None) -> None:
        self.limit = limit
        self.received = received
        super().__init__(message or f"Payload too large (limit {limit} bytes)")


class StorageError(OdfError):
    """The backing store could not be read or written."""

    code = "STORAGE_ERROR"
    default_category = ErrorCategory.STORAGE


class DatabaseError(StorageError):
    default_category = ErrorCategory.DATABASE


class ConfigError(OdfError):
    """A setting has a value odf-spine cannot work with."""

    code = "CONFIG_ERROR"
    default_category = ErrorCategory.CONFIG

    def __init__(self, key: str, value: Any = None, message: str | None = None) -> None:
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


__all__ = [
    "ConfigError",
    "DatabaseError",
    "ErrorCategory",
    "ErrorContext",
    "NotFoundError",
    "OdfError",
    "PayloadTooLargeError",
    "StorageError",
    "ValidationError",
]
