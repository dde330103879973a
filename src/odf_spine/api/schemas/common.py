"""
Response models shared by the routers.

Only failures and ``/health`` have a model. Frame routes answer with the
bare JSON the browser UI reads (an entry, ``{ok, lastSave}``,
``{keyword, total, items}``, ``{items}``).
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

_BOOTED_AT = time.monotonic()


def _uptime() -> float:
    return round(time.monotonic() - _BOOTED_AT, 1)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: str | None = None


class ProblemDetail(BaseModel):
    """Body of every 4xx/5xx response, in RFC 7807 shape plus ``code``.

    ``code`` is the operation error code: ``VALIDATION_FAILED`` (400),
    ``NOT_FOUND`` (404), ``PAYLOAD_TOO_LARGE`` (413), ``STORAGE_ERROR`` or
    ``INTERNAL`` (500). ``errors`` lists the error context, one item per
    key, e.g. ``{"code": "NOT_FOUND", "message": "region=North", "field": "region"}``.
    """

    type: str = "about:blank"
    title: str
    status: int
    code: str = ""
    detail: str = ""
    instance: str = Field(default="", description="URL of the failing request")
    errors: list[ErrorDetail] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"] = "healthy"
    service: str = "odf-spine"
    version: str = ""
    backend: str = ""
    uptime_s: float = Field(default_factory=_uptime)
    timestamp: str = Field(default_factory=_now_iso)
