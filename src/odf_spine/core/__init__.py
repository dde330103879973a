"""Core primitives shared by every odf-spine layer.

Errors, structured logging, settings, and the relational access layer
(connection factory, dialect, repository base).
"""

from odf_spine.core.errors import (
    ConfigError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    NotFoundError,
    OdfError,
    PayloadTooLargeError,
    StorageError,
    ValidationError,
)
from odf_spine.core.logging import configure_logging, get_logger
from odf_spine.core.settings import OdfSettings, get_settings

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
    "configure_logging",
    "get_logger",
    "OdfSettings",
    "get_settings",
]
