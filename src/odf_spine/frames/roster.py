"""
Subregion roster reconciliation.

The roster (``region → [sub, ...]``) decides which frame entries exist.
Replacing a region's roster is a diff against the stored membership:

- subs that disappeared have their frame entry deleted, ports and all,
  with no confirmation step;
- subs that appeared get a default 96-port frame, unless an entry for that
  ``(region, sub)`` already exists, which is left untouched.

Membership replacement, deletions, and creations run inside one
``store.transaction()`` so a transactional store applies them all or none.

Examples:
    >>> plan = plan_roster(["B", "C"], ["A", "B"])
    >>> plan.added, plan.removed
    (['C'], ['A'])

    Against a store::

        reconciler = RosterReconciler(store)
        result = reconciler.reconcile("North", ["B", "C"])
        result.created_count   # 1 unless ("North", "C") already had a frame

Tags:
    roster, reconciliation, cascade-delete, idempotent, odf-spine
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

from odf_spine.core.errors import ValidationError
from odf_spine.core.logging import get_logger
from odf_spine.frames.custom_fields import is_sequence
from odf_spine.frames.models import DEFAULT_PORT_COUNT, default_entry
from odf_spine.frames.normalizer import normalize_entry

if TYPE_CHECKING:
    from odf_spine.storage.base import FrameStore

logger = get_logger(__name__)

def normalize_roster(items: Any) -> list[str] | None:
    """Trimmed, non-blank, de-duplicated sub names in submitted order.

    A set has no submitted order and is taken sorted. Returns ``None`` when
    ``items`` is neither a list nor a set (malformed roster payload).
    """
    if isinstance(items, AbstractSet):
        items = sorted(items, key=str)
    if not is_sequence(items):
        return None
    names: list[str] = []
    for item in items:
        if item is None:
            continue
        name = str(item).strip()
        if name and name not in names:
            names.append(name)
    return names


@dataclass(frozen=True)
class RosterPlan:
    """Diff between desired and current membership.

    ``added`` keeps desired order; ``removed`` keeps current order.
    """

    desired: list[str]
    added: list[str]
    removed: list[str]


def plan_roster(desired: Iterable[str], current: Iterable[str]) -> RosterPlan:
    desired_list = list(dict.fromkeys(desired))
    current_list = list(dict.fromkeys(current))
    desired_set = set(desired_list)
    current_set = set(current_list)
    return RosterPlan(
        desired=desired_list,
        added=[sub for sub in desired_list if sub not in current_set],
        removed=[sub for sub in current_list if sub not in desired_set],
    )


@dataclass
class RosterResult:
    """Outcome of one reconciliation."""

    region: str
    items: list[str]
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "items": list(self.items),
            "added": list(self.added),
            "removed": list(self.removed),
            "created": self.created_count,
        }


class RosterReconciler:
    """Applies roster edits to a :class:`~odf_spine.storage.base.FrameStore`."""

    def __init__(self, store: FrameStore, *, port_count: int = DEFAULT_PORT_COUNT) -> None:
        self.store = store
        self.port_count = port_count

    def build_default(self, region: str, sub: str, today: date | None = None) -> dict[str, Any]:
        entry = normalize_entry(default_entry(region, sub, port_count=self.port_count, today=today))
        if entry is None:
            raise ValidationError("Invalid default entry", field="ports").with_context(region=region, sub=sub)
        return entry

    def reconcile(self, region: str, desired: Iterable[str], *, today: date | None = None) -> RosterResult:
        """Replace ``region``'s roster with ``desired`` and sync frame entries.

        ``desired`` is cleaned with :func:`normalize_roster` first; anything
        that is not a list or set of names raises :class:`ValidationError`
        before the store is touched. Storage failures propagate after the
        store has rolled back.
        """
        names = normalize_roster(desired)
        if names is None:
            raise ValidationError("Invalid payload", field="items", value=desired).with_context(region=region)

        with self.store.transaction() as tx:
            plan = plan_roster(names, tx.list_subregions(region))
            tx.replace_subregions(region, plan.desired)

            for sub in plan.removed:
                tx.delete(region, sub)

            created: list[str] = []
            for sub in plan.added:
                if tx.get(region, sub) is not None:
                    continue
                tx.put(region, sub, self.build_default(region, sub, today))
                created.append(sub)

        result = RosterResult(
            region=region,
            items=plan.desired,
            added=plan.added,
            removed=plan.removed,
            created=created,
        )
        logger.info(
            "roster_reconciled",
            region=region,
            subs=len(plan.desired),
            added=len(plan.added),
            removed=len(plan.removed),
            created=result.created_count,
        )
        return result


__all__ = [
    "normalize_roster",
    "plan_roster",
    "RosterPlan",
    "RosterResult",
    "RosterReconciler",
]
