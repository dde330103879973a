"""
Subregions router: the per-region roster.

Endpoints:
    GET  /subregions?region   {items}
    POST /subregions          Replace a roster; removed subs lose their frame,
                              added subs get a default frame
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from odf_spine.api.deps import OpContext
from odf_spine.api.schemas.frames import SubregionPayload
from odf_spine.api.utils import unwrap
from odf_spine.ops import subregions as roster_ops

router = APIRouter(prefix="/subregions")


@router.get("")
def list_subregions(request: Request, ctx: OpContext, region: str | None = None) -> Any:
    return unwrap(roster_ops.list_subregions(ctx, region), request)


@router.post("")
def update_subregions(request: Request, ctx: OpContext, payload: SubregionPayload) -> Any:
    """Reconcile the region's frame entries against the submitted roster."""
    return unwrap(roster_ops.update_subregions(ctx, payload.region, payload.items), request)
