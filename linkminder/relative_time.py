"""
Relative reminder phrases ("2.5 hours from now", "3 days later") and the
ISO-8601 helpers used to store the resulting instants.

All instants handled here are timezone-aware UTC datetimes. Durations are
fixed-length (an hour is 3600 seconds, a day 86400 seconds); no calendar or
DST arithmetic is applied.
"""

import re
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

RELATIVE_RE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(hour|hr|minute|min|day)s?\s+(from\s+now|later|hence)\s*$",
    re.IGNORECASE,
)

UNIT_SECONDS = {
    "hour": 3600,
    "minute": 60,
    "day": 86400,
}

UNIT_ALIASES = {
    "hr": "hour",
    "min": "minute",
}


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def parse(text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Turn a relative phrase into an absolute UTC instant.

    Returns None when the text is not a relative expression; callers keep the
    text verbatim in that case.
    """
    if not isinstance(text, str):
        return None
    match = RELATIVE_RE.match(text)
    if not match:
        return None

    value = float(match.group(1))
    unit = match.group(2).lower()
    unit = UNIT_ALIASES.get(unit, unit)

    base = _as_utc(now) if now is not None else utcnow()
    try:
        return base + timedelta(seconds=value * UNIT_SECONDS[unit])
    except OverflowError:
        return None


def to_iso(instant: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2025-05-14T20:00:00.000Z"""
    d = _as_utc(instant)
    return (
        f"{d.year:04d}-{d.month:02d}-{d.day:02d}"
        f"T{d.hour:02d}:{d.minute:02d}:{d.second:02d}.{d.microsecond // 1000:03d}Z"
    )


def parse_iso(value: object) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    if raw[-1] in "Zz":
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    try:
        return _as_utc(parsed)
    except OverflowError:
        return None


def parse_to_iso(text: str, now: Optional[datetime] = None) -> Optional[str]:
    instant = parse(text, now)
    if instant is None:
        return None
    return to_iso(instant)
