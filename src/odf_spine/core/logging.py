"""
Structured logging for odf-spine, on structlog.

Modules log snake_case events with keyword fields::

    logger = get_logger(__name__)
    logger.info("frame_saved", storage_key="North||A", ports=96)

Rendering is JSON when the destination stream is not a terminal (a server
under a process manager, CLI output piped to a file) and colored key/value
lines otherwise. The API binds ``request_id``, ``method`` and ``path`` with
:class:`LogContext`; those fields ride along on every event logged while
the request is in flight.

The CLI passes ``stream=sys.stderr`` so stdout stays reserved for command
output such as ``--json`` payloads.

Tags:
    logging, structlog, observability, odf-spine
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "odf-spine"


def _service_stamper(service: str) -> Processor:
    def stamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return stamp


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = SERVICE_NAME,
    add_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and route the standard library through the same stream.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        json_format: Force JSON (True) or console (False); None picks by TTY
        service: Value of the ``service`` field on every event
        add_timestamp: Prefix events with an ISO timestamp
        stream: Destination, stdout when omitted
    """
    stream = stream or sys.stdout
    if json_format is None:
        json_format = not stream.isatty()
    threshold = _level_number(level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service_stamper(service),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=stream.isatty())]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # uvicorn logs through the standard library
    logging.basicConfig(format="%(message)s", stream=stream, level=threshold, force=True)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


class LogContext:
    """Bind fields to every event logged inside the block (sync or async).

    Example:
        with LogContext(storage_key="North||A"):
            logger.info("frame_loaded")
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._tokens: Any = None

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)

    async def __aenter__(self) -> LogContext:
        return self.__enter__()

    async def __aexit__(self, *exc_info: Any) -> None:
        self.__exit__(*exc_info)


__all__ = ["SERVICE_NAME", "LogContext", "configure_logging", "get_logger"]
