"""
Search router.

Endpoints:
    GET /search?keyword    {keyword, total, items} across every frame entry
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Request

from odf_spine.api.deps import OpContext
from odf_spine.api.utils import unwrap
from odf_spine.ops.frames import search_frames

router = APIRouter(prefix="/search")


@router.get("")
def search(
    request: Request,
    ctx: OpContext,
    keyword: str | None = None,
    limit: int | None = Query(None, ge=1, description="Cap below the configured search limit"),
) -> Any:
    """Case-insensitive keyword search with deep links to matching ports."""
    return unwrap(search_frames(ctx, keyword, limit), request)
