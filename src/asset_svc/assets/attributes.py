"""Typed coercion helpers over raw attribute values."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..errors import FormatError
from .types import AssetData, AssetId


def good_string(value: str | None) -> bool:
    """True if the value is a string that is non-empty after trimming."""
    return value is not None and len(value.strip()) > 0


def as_string(value: Any) -> str | None:
    """Coerce a raw attribute value to a string. None stays None."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def as_date(value: Any) -> datetime | None:
    """
    Coerce a raw attribute value to a datetime.

    Accepts datetime, date (taken as midnight) and ISO-8601 strings.
    Blank strings are treated as no value.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        if not good_string(value):
            return None
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            raise FormatError(f"Not a date: {value!r}") from None
    raise FormatError(f"Cannot convert {type(value).__name__} to a date")


def as_asset_id(value: Any) -> AssetId | None:
    """Coerce a raw attribute value to an AssetId (AssetId or 'type:id' text)."""
    if value is None:
        return None
    if isinstance(value, AssetId):
        return value
    if isinstance(value, str):
        if not good_string(value):
            return None
        return AssetId.parse(value.strip())
    raise FormatError(f"Cannot convert {type(value).__name__} to an asset id")


def as_long(value: Any) -> int | None:
    """Coerce a raw attribute value to an integer."""
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = as_string(value)
    if not good_string(text):
        return None
    try:
        return int(text.strip())
    except ValueError:
        raise FormatError(f"Not a number: {value!r}") from None


def get_with_fallback(data: AssetData, *names: str) -> str | None:
    """
    Return the first attribute among ``names`` whose string value is
    non-empty after trimming, or None if none qualifies.

    Example: get_with_fallback(data, "linktext", "h1title")
    """
    for name in names:
        value = as_string(data.get_attribute(name))
        if good_string(value):
            return value
    return None
