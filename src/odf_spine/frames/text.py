"""Scalar cleaning rules shared by the normalizer and resolver."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_WHITESPACE = re.compile(r"\s+")
# Differ in year, month and day
_FALLBACK_DATES = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def clean_text(value: Any) -> str:
    """Stringify a scalar; ``None`` and the literal text ``"null"`` become empty."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return "" if value.strip().lower() == "null" else value
    return str(value)


def clean_date(value: Any) -> str:
    """Reduce a date-ish value to ``YYYY-MM-DD`` when it can be parsed.

    Text must name a year, month and day. Parsing against two different
    fallback dates exposes any part the text leaves out, so ``"2024"`` or
    ``"5"`` is never completed from the current date. Unparseable or partial
    text is returned unchanged so nothing typed by a user is lost.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = clean_text(value)
    if not text:
        return ""

    match = _ISO_DATE_PREFIX.match(text)
    if match:
        return match.group(0)

    try:
        first = date_parser.parse(text, default=_FALLBACK_DATES[0]).date()
        second = date_parser.parse(text, default=_FALLBACK_DATES[1]).date()
    except (ValueError, OverflowError):
        return text
    return first.isoformat() if first == second else text

def collapse_whitespace(value: Any) -> str:
    return _WHITESPACE.sub(" ", "" if value is None else str(value)).strip()


def clip_text(value: Any, max_len: int = 120) -> str:
    """Whitespace-collapse and clip, ending in ``...`` when truncated."""
    text = collapse_whitespace(value)
    if len(text) <= max_len:
        return text
    return f"{text[: max_len - 3]}..."


__all__ = ["clean_text", "clean_date", "collapse_whitespace", "clip_text"]
