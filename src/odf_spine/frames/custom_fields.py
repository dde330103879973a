"""
Custom field resolution across the three historical encodings.

A frame's admin-defined custom fields (``extraFieldDefs``) have been stored
on ports in three different shapes over time:

1. ``customFields``:     a ``{label: value}`` map (current)
2. ``extraFieldValues``: a flat value list aligned with the definitions
3. ``extraFields``:      a list of ``{"value": ...}`` records, also aligned

:func:`resolve_custom_fields` reconciles whatever a port carries against the
ordered definition list. Each encoding is modelled as a source in a fixed
priority chain; for every label the first source that has a value wins, and
a label no source knows resolves to an empty string.

Manifesto:
    - **One place:** no other module sniffs custom-field shapes
    - **Fixed priority:** map, then flat list, then record list
    - **Index aligned:** legacy lists are read by the label's position in the
      raw definition list, not by key
    - **Closed output:** exactly one key per distinct non-blank label,
      in definition order

Examples:
    >>> resolve_custom_fields({"extraFieldValues": ["10km"]}, ["Distance"])
    {'Distance': '10km'}
    >>> resolve_custom_fields(
    ...     {"customFields": {"Owner": "NOC"}, "extraFields": [{"value": "x"}, {"value": "y"}]},
    ...     ["Owner", "Rack"],
    ... )
    {'Owner': 'NOC', 'Rack': 'y'}

Tags:
    custom-fields, compatibility, legacy-encoding, odf-spine
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from odf_spine.frames.text import clean_text

_MISSING = object()


def is_sequence(value: Any) -> bool:
    """True for list-like values (``str``/``bytes`` excluded)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def field_label(raw: Any) -> str:
    """Trimmed label text; ``None`` becomes empty."""
    return "" if raw is None else str(raw).strip()


def clean_field_defs(defs: Any) -> list[str]:
    """Trimmed, non-blank, de-duplicated labels in first-seen order."""
    if not is_sequence(defs):
        return []
    labels: list[str] = []
    for raw in defs:
        label = field_label(raw)
        if label and label not in labels:
            labels.append(label)
    return labels


# ---------------------------------------------------------------------------
# Encodings, in priority order
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MapEncoding:
    """``customFields: {label: value}``; looked up by label."""

    values: Mapping[str, Any]

    def lookup(self, label: str, index: int) -> Any:
        return self.values.get(label, _MISSING)


@dataclass(frozen=True)
class FlatListEncoding:
    """``extraFieldValues: [value, ...]``; looked up by position."""

    values: Sequence[Any]

    def lookup(self, label: str, index: int) -> Any:
        if index < len(self.values):
            return self.values[index]
        return _MISSING


@dataclass(frozen=True)
class RecordListEncoding:
    """``extraFields: [{"value": ...}, ...]``; looked up by position."""

    records: Sequence[Any]

    def lookup(self, label: str, index: int) -> Any:
        if index >= len(self.records):
            return _MISSING
        record = self.records[index]
        if isinstance(record, Mapping):
            return record.get("value", "")
        return ""


FieldEncoding = MapEncoding | FlatListEncoding | RecordListEncoding


def port_encodings(port: Any) -> list[FieldEncoding]:
    """Encodings a port carries, highest priority first."""
    if not isinstance(port, Mapping):
        return []

    chain: list[FieldEncoding] = []
    custom = port.get("customFields")
    if isinstance(custom, Mapping):
        chain.append(MapEncoding(custom))
    flat = port.get("extraFieldValues")
    if is_sequence(flat):
        chain.append(FlatListEncoding(flat))
    records = port.get("extraFields")
    if is_sequence(records):
        chain.append(RecordListEncoding(records))
    return chain


def resolve_custom_fields(port: Any, field_defs: Any) -> dict[str, str]:
    """Resolve a port's custom field values against ``field_defs``.

    Labels are trimmed and blank labels skipped (they still occupy their
    position for the index-aligned encodings). When two definitions trim to
    the same label, the key keeps its first position and takes the value
    resolved for the later definition.
    """
    if not is_sequence(field_defs):
        return {}

    chain = port_encodings(port)
    resolved: dict[str, str] = {}

    for index, raw_label in enumerate(field_defs):
        label = field_label(raw_label)
        if not label:
            continue
        value: Any = ""
        for encoding in chain:
            found = encoding.lookup(label, index)
            if found is not _MISSING:
                value = found
                break
        resolved[label] = clean_text(value)

    return resolved


def map_field_keys(port: Any) -> list[str] | None:
    """Keys of a port's map-shaped ``customFields`` (``None`` when absent)."""
    if isinstance(port, Mapping) and isinstance(port.get("customFields"), Mapping):
        return [str(key) for key in port["customFields"].keys()]
    return None


__all__ = [
    "MapEncoding",
    "FlatListEncoding",
    "RecordListEncoding",
    "FieldEncoding",
    "clean_field_defs",
    "field_label",
    "is_sequence",
    "map_field_keys",
    "port_encodings",
    "resolve_custom_fields",
]
