"""
Keyword search over stored frame entries.

A linear, unindexed scan: every entry is checked once against its metadata
(storage key, region, sub) and then walked structurally, leaf by leaf, for a
case-insensitive substring match. Each hit is returned as a
:class:`SearchMatch` carrying a locator path into the entry and a deep link
the UI can open directly on the matching port.

Manifesto:
    - **Closed node model:** values are classified as scalar, sequence, or
      mapping and walked structurally; nothing else is dispatched on
    - **Bounded:** the result list never exceeds ``limit``; scanning stops
      as soon as it is full
    - **Stable order:** entry order, then metadata before structure, then
      traversal order

Architecture:
    ::

        for (storage_key, entry) in entries:
            metadata "key region sub" contains keyword? ──► match (no port)
            walk(entry, tokens=[])
              ├── MAPPING  → walk(child, tokens + [key])
              ├── SEQUENCE → walk(item,  tokens + [index])
              └── SCALAR   → text contains keyword? ──► match
                              tokens → locatorPath  odf["North||A"].ports[2].status
                                     → portNumber   3
                                     → fieldPath    "status"

Examples:
    >>> format_locator_path("North||A", ["ports", 2, "status"])
    'odf["North||A"].ports[2].status'
    >>> extract_port_info(["ports", 2, "customFields", "Owner"])
    (3, 'customFields.Owner')
    >>> build_frame_link("North", "A 1", 3)
    'odf.html?region=North&sub=A%201&port=3'

Tags:
    search, keyword, traversal, deep-link, odf-spine
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

from odf_spine.frames.custom_fields import is_sequence
from odf_spine.frames.models import split_storage_key
from odf_spine.frames.text import clip_text, collapse_whitespace

DEFAULT_SEARCH_LIMIT = 100
PREVIEW_LENGTH = 160
LINK_PAGE = "odf.html"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
# Characters a browser's encodeURIComponent leaves untouched
_LINK_SAFE = "-_.!~*'()"

Token = str | int


class NodeKind(str, Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(value: Any) -> NodeKind:
    if isinstance(value, Mapping):
        return NodeKind.MAPPING
    if is_sequence(value):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def leaf_text(value: Any) -> str:
    """Text a scalar leaf is matched and previewed as."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class SearchMatch:
    """One search hit. Ephemeral; never persisted."""

    region: str
    sub: str
    storage_key: str
    locator_path: str
    matched_preview: str
    link: str
    port_number: int | None
    field_path: str
    keyword: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "region": self.region,
            "sub": self.sub,
            "storageKey": self.storage_key,
            "locatorPath": self.locator_path,
            "matchedPreview": self.matched_preview,
            "link": self.link,
            "exactLink": self.link,
            "portNumber": self.port_number,
            "fieldPath": self.field_path,
            "keyword": self.keyword,
        }


def _quote_key(key: Any) -> str:
    escaped = str(key).replace("\\", "\\\\").replace('"', '\\"')
    return f'["{escaped}"]'


def format_locator_path(storage_key: str, tokens: Iterable[Token]) -> str:
    """Render tokens as a path rooted at ``odf["<storage_key>"]``."""
    parts = [f"odf{_quote_key(storage_key)}"]
    for token in tokens:
        if isinstance(token, int):
            parts.append(f"[{token}]")
        elif _IDENTIFIER.match(token):
            parts.append(f".{token}")
        else:
            parts.append(_quote_key(token))
    return "".join(parts)


def build_frame_link(region: str, sub: str, port_number: int | None = None) -> str:
    link = f"{LINK_PAGE}?region={quote(region, safe=_LINK_SAFE)}&sub={quote(sub, safe=_LINK_SAFE)}"
    if port_number is not None and port_number > 0:
        link += f"&port={port_number}"
    return link


def extract_port_info(tokens: list[Token]) -> tuple[int | None, str]:
    """``(port_number, field_path)`` for a path through ``ports[i]``."""
    for i in range(len(tokens) - 1):
        if tokens[i] != "ports":
            continue
        index = tokens[i + 1]
        if not isinstance(index, int) or index < 0:
            continue
        rest = tokens[i + 2 :]
        field_path = ".".join(f"[{t}]" if isinstance(t, int) else str(t) for t in rest)
        return index + 1, field_path
    return None, ""


class KeywordLocator:
    """Case-insensitive substring search across frame entries."""

    def __init__(self, keyword: str, *, limit: int = DEFAULT_SEARCH_LIMIT) -> None:
        self.keyword = collapse_whitespace(keyword)
        self.needle = str(keyword).strip().casefold()
        self.limit = limit
        self.results: list[SearchMatch] = []

    @property
    def full(self) -> bool:
        return len(self.results) >= self.limit

    def search(self, entries: Iterable[tuple[str, Any]]) -> list[SearchMatch]:
        if not self.needle:
            return []
        for key, entry in entries:
            if self.full:
                break
            self._scan_entry(key, entry)
        return self.results

    def _scan_entry(self, key: str, entry: Any) -> None:
        key_region, key_sub = split_storage_key(key)
        body = entry if isinstance(entry, Mapping) else {}
        region = str(body.get("region") or key_region)
        sub = str(body.get("sub") or key_sub)

        metadata = f"{key} {region} {sub}"
        if self.needle in metadata.casefold():
            self.results.append(
                SearchMatch(
                    region=region,
                    sub=sub,
                    storage_key=key,
                    locator_path=format_locator_path(key, []),
                    matched_preview=clip_text(metadata, PREVIEW_LENGTH),
                    link=build_frame_link(region, sub),
                    port_number=None,
                    field_path="",
                    keyword=self.keyword,
                )
            )
            if self.full:
                return

        self._walk(entry, [], key, region, sub)

    def _walk(self, value: Any, tokens: list[Token], key: str, region: str, sub: str) -> None:
        if self.full or value is None:
            return

        kind = classify(value)
        if kind is NodeKind.MAPPING:
            for child_key, child in value.items():
                if self.full:
                    return
                self._walk(child, [*tokens, str(child_key)], key, region, sub)
            return
        if kind is NodeKind.SEQUENCE:
            for index, item in enumerate(value):
                if self.full:
                    return
                self._walk(item, [*tokens, index], key, region, sub)
            return

        text = leaf_text(value)
        if self.needle not in text.casefold():
            return
        port_number, field_path = extract_port_info(tokens)
        self.results.append(
            SearchMatch(
                region=region,
                sub=sub,
                storage_key=key,
                locator_path=format_locator_path(key, tokens),
                matched_preview=clip_text(text, PREVIEW_LENGTH),
                link=build_frame_link(region, sub, port_number),
                port_number=port_number,
                field_path=field_path,
                keyword=self.keyword,
            )
        )


def search_entries(
    entries: Iterable[tuple[str, Any]],
    keyword: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[SearchMatch]:
    """Search ``(storage_key, entry)`` pairs; blank keywords match nothing."""
    return KeywordLocator(keyword, limit=limit).search(entries)


def search_response(
    entries: Iterable[tuple[str, Any]],
    keyword: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> dict[str, Any]:
    """``{keyword, total, items}`` as returned by the search endpoint."""
    matches = search_entries(entries, keyword, limit)
    return {
        "keyword": str(keyword).strip(),
        "total": len(matches),
        "items": [match.to_dict() for match in matches],
    }


__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "NodeKind",
    "SearchMatch",
    "KeywordLocator",
    "classify",
    "leaf_text",
    "format_locator_path",
    "build_frame_link",
    "extract_port_info",
    "search_entries",
    "search_response",
]
