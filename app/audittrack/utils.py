from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def utcnow() -> datetime:
    """Naive UTC timestamp; all stored datetimes are naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _from_epoch(seconds: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


def parse_datetime(value: object) -> datetime | None:
    """
    Normalize a stored date value to a naive UTC datetime.

    Accepts datetimes, dates, ISO-8601 strings ("2024-01-05", "2024-01-05T10:00:00Z"),
    epoch seconds and {"seconds": n} timestamp objects. Anything unparseable
    returns None; callers treat that as "absent".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return _from_epoch(value)
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            return _from_epoch(seconds)
        return None
    if isinstance(value, str):
        raw = value.strip()
        if not _ISO_DATE_PREFIX.match(raw):
            return None
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            return _to_naive_utc(datetime.fromisoformat(raw))
        except ValueError:
            return None
    return None


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round .5 away from zero for positive values (round() uses banker's rounding)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


_TRUTHY = {"1", "true", "yes", "on", "y"}


def parse_bool(value: object) -> bool:
    """Form/JSON flag: real bools and numbers as-is, strings only when truthy ("true", "1", "yes", "on")."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value or "").strip().lower() in _TRUTHY
