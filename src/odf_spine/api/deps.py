"""
Router dependencies.

``create_app`` puts the settings and the frame store on ``app.state``; the
functions here hand them to routes, and :data:`OpContext` wraps both in an
:class:`~odf_spine.ops.context.OperationContext` tagged with the request ID::

    @router.get("/odf")
    def read_frame(ctx: OpContext, region: str | None = None, sub: str | None = None):
        return unwrap(get_frame(ctx, region, sub), request)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from odf_spine.core.settings import OdfSettings
from odf_spine.core.settings import get_settings as _env_settings
from odf_spine.ops.context import OperationContext
from odf_spine.storage.base import FrameStore


def get_settings(request: Request) -> OdfSettings:
    return getattr(request.app.state, "settings", None) or _env_settings()


def get_store(request: Request) -> FrameStore:
    return request.app.state.store


Settings = Annotated[OdfSettings, Depends(get_settings)]
Store = Annotated[FrameStore, Depends(get_store)]


def get_operation_context(request: Request, store: Store, settings: Settings) -> OperationContext:
    ctx = OperationContext(store=store, settings=settings, caller="api")
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        ctx.request_id = request_id
    return ctx


OpContext = Annotated[OperationContext, Depends(get_operation_context)]
