"""
Frames router: read, save, and delete one frame entry.

Endpoints:
    GET    /odf?region&sub    Normalized entry (repaired in storage if needed)
    POST   /odf               Save a full entry, returns {ok, lastSave}
    DELETE /odf?region&sub    Delete an entry and its ports, returns {ok, deleted}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from odf_spine.api.deps import OpContext
from odf_spine.api.schemas.frames import FramePayload
from odf_spine.api.utils import unwrap
from odf_spine.ops import frames as frame_ops

router = APIRouter(prefix="/odf")


@router.get("")
def read_frame(request: Request, ctx: OpContext, region: str | None = None, sub: str | None = None) -> Any:
    """Return the canonical entry for ``(region, sub)``."""
    return unwrap(frame_ops.get_frame(ctx, region, sub), request)


@router.post("")
def save_frame(request: Request, ctx: OpContext, payload: FramePayload) -> Any:
    """Replace the entry for the payload's ``(region, sub)``."""
    return unwrap(frame_ops.save_frame(ctx, payload.model_dump()), request)


@router.delete("")
def delete_frame(request: Request, ctx: OpContext, region: str | None = None, sub: str | None = None) -> Any:
    return unwrap(frame_ops.delete_frame(ctx, region, sub), request)
