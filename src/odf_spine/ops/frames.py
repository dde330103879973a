"""
Frame entry operations.

Read, write, delete, and search frame entries through the context's store.
Every entry that leaves or enters the store passes through
:func:`~odf_spine.frames.normalizer.normalize_entry`; reads write the
normalized entry back only when :func:`needs_persist` says it changed
materially.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from odf_spine.core.errors import NotFoundError, OdfError, ValidationError
from odf_spine.core.logging import get_logger
from odf_spine.frames.custom_fields import is_sequence
from odf_spine.frames.models import storage_key, utc_now_iso
from odf_spine.frames.normalizer import needs_persist, normalize_entry, parse_number
from odf_spine.frames.search import search_response
from odf_spine.ops.context import OperationContext
from odf_spine.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def _require_key(region: Any, sub: Any) -> tuple[str, str]:
    if not region or not sub:
        raise ValidationError("Missing region or sub", field="region" if not region else "sub")
    return str(region), str(sub)


def _internal(action: str, exc: Exception, elapsed_ms: float) -> OperationResult[Any]:
    logger.exception("op_failed", action=action, error=str(exc))
    return OperationResult.internal(action, exc, elapsed_ms=elapsed_ms)


def get_frame(ctx: OperationContext, region: str | None, sub: str | None) -> OperationResult[dict]:
    """Load, normalize, and (when needed) write back one frame entry."""
    timer = start_timer()
    try:
        region, sub = _require_key(region, sub)
        raw = ctx.store.get(region, sub)
        entry = normalize_entry(raw) if raw else None
        if entry is None:
            raise NotFoundError("Not found").with_context(region=region, sub=sub)

        if needs_persist(raw, entry):
            ctx.store.put(region, sub, entry)
            logger.info(
                "frame_repaired",
                storage_key=storage_key(region, sub),
                ports=entry["displayCount"],
                **ctx.log_fields(),
            )

        return OperationResult.ok(entry, elapsed_ms=timer.elapsed_ms)
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _internal("get frame", exc, timer.elapsed_ms)


def save_frame(ctx: OperationContext, payload: Any) -> OperationResult[dict]:
    """Normalize a submitted frame and replace the stored entry.

    Only ``region``, ``sub``, ``ports``, ``displayCount`` and
    ``extraFieldDefs`` are taken from the payload; ``lastSave`` is stamped
    here.
    """
    timer = start_timer()
    try:
        if not isinstance(payload, Mapping):
            raise ValidationError("Invalid payload", value=type(payload).__name__)
        if not payload.get("region") or not payload.get("sub") or not is_sequence(payload.get("ports")):
            raise ValidationError("Invalid payload", field="ports")

        region, sub = str(payload["region"]), str(payload["sub"])
        ports = list(payload["ports"])
        parsed_count = parse_number(payload.get("displayCount"))
        last_save = utc_now_iso()

        entry = normalize_entry(
            {
                "region": region,
                "sub": sub,
                "ports": ports,
                "displayCount": parsed_count if parsed_count is not None else len(ports),
                "lastSave": last_save,
                "extraFieldDefs": payload.get("extraFieldDefs"),
            }
        )
        if entry is None:
            raise ValidationError("Invalid payload", field="ports")
        ctx.store.put(region, sub, entry)

        logger.info(
            "frame_saved",
            storage_key=storage_key(region, sub),
            ports=entry["displayCount"],
            fields=len(entry["extraFieldDefs"]),
            **ctx.log_fields(),
        )
        return OperationResult.ok({"ok": True, "lastSave": last_save}, elapsed_ms=timer.elapsed_ms)
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _internal("save frame", exc, timer.elapsed_ms)


def delete_frame(ctx: OperationContext, region: str | None, sub: str | None) -> OperationResult[dict]:
    """Remove a frame entry and its ports. Deleting a missing entry succeeds."""
    timer = start_timer()
    try:
        region, sub = _require_key(region, sub)
        deleted = ctx.store.delete(region, sub)
        logger.info("frame_deleted", storage_key=storage_key(region, sub), existed=deleted, **ctx.log_fields())
        return OperationResult.ok({"ok": True, "deleted": deleted}, elapsed_ms=timer.elapsed_ms)
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _internal("delete frame", exc, timer.elapsed_ms)


def search_frames(
    ctx: OperationContext,
    keyword: str | None,
    limit: int | None = None,
) -> OperationResult[dict]:
    """Keyword search across every stored entry."""
    timer = start_timer()
    try:
        text = (keyword or "").strip()
        if not text:
            raise ValidationError("Missing keyword", field="keyword")

        bound = min(limit, ctx.settings.search_limit) if limit else ctx.settings.search_limit
        response = search_response(ctx.store.iter_entries(), text, bound)
        logger.debug("frames_searched", keyword=text, total=response["total"])
        return OperationResult.ok(response, elapsed_ms=timer.elapsed_ms)
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _internal("search frames", exc, timer.elapsed_ms)
