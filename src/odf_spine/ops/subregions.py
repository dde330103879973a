"""
Subregion roster operations.

Reading a roster is a plain lookup. Replacing one drives the
:class:`~odf_spine.frames.roster.RosterReconciler`: removed subs lose their
frame entries and added subs get default frames, all in one store
transaction.
"""

from __future__ import annotations

from typing import Any

from odf_spine.core.errors import OdfError, ValidationError
from odf_spine.core.logging import get_logger
from odf_spine.frames.roster import RosterReconciler
from odf_spine.ops.context import OperationContext
from odf_spine.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def list_subregions(ctx: OperationContext, region: str | None) -> OperationResult[dict]:
    """Roster for ``region``; an unknown region has an empty roster."""
    timer = start_timer()
    try:
        if not region:
            raise ValidationError("Missing region", field="region")
        items = ctx.store.list_subregions(str(region))
        return OperationResult.ok({"items": items}, elapsed_ms=timer.elapsed_ms)
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", action="list subregions", error=str(exc))
        return OperationResult.internal("list subregions", exc, elapsed_ms=timer.elapsed_ms)


def update_subregions(ctx: OperationContext, region: str | None, items: Any) -> OperationResult[dict]:
    """Replace ``region``'s roster and reconcile frame entries against it."""
    timer = start_timer()
    try:
        if not region:
            raise ValidationError("Invalid payload", field="region")

        reconciler = RosterReconciler(ctx.store, port_count=ctx.settings.default_port_count)
        result = reconciler.reconcile(str(region), items)
        return OperationResult.ok({"ok": True, **result.to_dict()}, elapsed_ms=timer.elapsed_ms)
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", action="update subregions", error=str(exc))
        return OperationResult.internal("update subregions", exc, elapsed_ms=timer.elapsed_ms)
