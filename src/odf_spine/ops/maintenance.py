"""
Maintenance operations.

``normalize_all`` sweeps every stored entry through the normalizer and writes
back the ones a read would have repaired anyway, so a migrated data file can
be brought to the canonical shape in one pass.
"""

from __future__ import annotations

from odf_spine.core.errors import OdfError
from odf_spine.core.logging import get_logger
from odf_spine.frames.models import split_storage_key
from odf_spine.frames.normalizer import needs_persist, normalize_entry
from odf_spine.ops.context import OperationContext
from odf_spine.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def normalize_all(ctx: OperationContext, *, dry_run: bool = False) -> OperationResult[dict]:
    """Re-normalize every entry; persist those that changed materially.

    Entries without a port list are counted as ``invalid`` and left alone.
    """
    timer = start_timer()
    scanned = updated = invalid = 0
    try:
        with ctx.store.transaction() as tx:
            for key, raw in list(tx.iter_entries()):
                scanned += 1
                entry = normalize_entry(raw)
                if entry is None:
                    invalid += 1
                    logger.warning("entry_invalid", storage_key=key)
                    continue
                if not needs_persist(raw, entry):
                    continue
                updated += 1
                if not dry_run:
                    region, sub = split_storage_key(key)
                    tx.put(region, sub, entry)

        logger.info(
            "entries_normalized",
            scanned=scanned,
            updated=updated,
            invalid=invalid,
            dry_run=dry_run,
            **ctx.log_fields(),
        )
        return OperationResult.ok(
            {"scanned": scanned, "updated": updated, "invalid": invalid, "dry_run": dry_run},
            elapsed_ms=timer.elapsed_ms,
        )
    except OdfError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", action="normalize entries", error=str(exc))
        return OperationResult.internal("normalize entries", exc, elapsed_ms=timer.elapsed_ms)
