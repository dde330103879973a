"""
Request bodies for the frame and roster routes.

Fields are deliberately loose: shape checks (``ports`` is a list, ``items``
is a list) belong to the operations layer so the API and CLI reject the same
payloads with the same ``VALIDATION_FAILED`` code. Unknown keys are kept.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FramePayload(BaseModel):
    """``POST /api/odf`` body."""

    model_config = ConfigDict(extra="allow")

    region: str | None = Field(default=None, description="Region name")
    sub: str | None = Field(default=None, description="Subregion name")
    ports: Any = Field(default=None, description="Port records, any historical encoding")
    displayCount: Any = Field(default=None, description="Requested port count (never shrinks below len(ports))")
    extraFieldDefs: Any = Field(default=None, description="Ordered custom field labels")


class SubregionPayload(BaseModel):
    """``POST /api/subregions`` body."""

    model_config = ConfigDict(extra="allow")

    region: str | None = Field(default=None, description="Region name")
    items: Any = Field(default=None, description="Desired subregion names, in display order")
