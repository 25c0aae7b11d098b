"""
Upgrade records decoded from storage to the current Link schema.

Stored records come from several generations of the app. The oldest ones only
carry `text`/`url` and a free-text `scheduledTime`; newer ones split that into
`scheduledTimeDisplay` and an authoritative `scheduledDateTimeActual`. Nothing
about the decoded shape is trusted: every field is checked on its own and bad
values fall back to defaults instead of raising.
"""

import math
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from .models import Link
from .relative_time import parse, parse_iso, to_iso

PLACEHOLDER_TEXT = "Untitled Link"
PLACEHOLDER_URL = "#"
LEGACY_REMINDER_FIELD = "scheduledTime"


def _clean_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _coerce_date_added(value: Any) -> int:
    # bool is an int subclass, but never a timestamp
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return 0
        return int(value)
    return 0


def normalize(raw: Any, now: Optional[datetime] = None) -> Link:
    if isinstance(raw, Link):
        raw = raw.to_record()
    if not isinstance(raw, Mapping):
        raw = {}

    text = _clean_str(raw.get("text")) or PLACEHOLDER_TEXT
    url = _clean_str(raw.get("url")) or PLACEHOLDER_URL
    date_added = _coerce_date_added(raw.get("dateAdded"))

    display = _clean_str(raw.get("scheduledTimeDisplay"))
    actual = raw.get("scheduledDateTimeActual")

    legacy = raw.get(LEGACY_REMINDER_FIELD)
    if legacy is not None and not actual:
        legacy = _clean_str(legacy)
        if legacy is not None:
            if display is None:
                display = legacy
            parsed = parse(legacy, now)
            if parsed is not None:
                actual = to_iso(parsed)

    instant = parse_iso(actual)
    actual = to_iso(instant) if instant is not None else None

    return Link(
        text=text,
        url=url,
        date_added=date_added,
        scheduled_time_display=display,
        scheduled_date_time_actual=actual,
    )


def normalize_all(items: Iterable[Any], now: Optional[datetime] = None) -> List[Link]:
    return [normalize(item, now) for item in items]
