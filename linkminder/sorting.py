import locale
from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional, Union

from .models import Link, SortCriterion
from .relative_time import parse_iso

Comparator = Callable[[Link, Link], int]


def parse_criterion(value: object) -> Optional[SortCriterion]:
    if isinstance(value, SortCriterion):
        return value
    if isinstance(value, str):
        try:
            return SortCriterion(value.strip())
        except ValueError:
            return None
    return None


def _sign(n: float) -> int:
    return (n > 0) - (n < 0)


def collate(a: str, b: str) -> int:
    """Locale-aware comparison, case-insensitive first so "apple" < "Banana"."""
    primary = locale.strcoll(a.casefold(), b.casefold())
    if primary:
        return _sign(primary)
    return _sign(locale.strcoll(a, b))


def _compare_date_added(a: Link, b: Link) -> int:
    return _sign((a.date_added or 0) - (b.date_added or 0))


def _compare_text(a: Link, b: Link) -> int:
    return collate(a.text, b.text)


def _scheduled_comparator(direction: int) -> Comparator:
    # Having a reminder outranks having none in both directions; only the
    # instant/text comparison itself flips with `direction`.
    def compare(a: Link, b: Link) -> int:
        a_at = parse_iso(a.scheduled_date_time_actual)
        b_at = parse_iso(b.scheduled_date_time_actual)
        if a_at is not None and b_at is not None:
            return direction * _sign((a_at - b_at).total_seconds())
        if a_at is not None:
            return -1
        if b_at is not None:
            return 1

        a_text = a.scheduled_time_display
        b_text = b.scheduled_time_display
        if a_text and b_text:
            return direction * collate(a_text, b_text)
        if a_text:
            return -1
        if b_text:
            return 1
        return 0

    return compare


COMPARATORS = {
    SortCriterion.DATE_ADDED_ASC: _compare_date_added,
    SortCriterion.DATE_ADDED_DESC: lambda a, b: -_compare_date_added(a, b),
    SortCriterion.TEXT_ASC: _compare_text,
    SortCriterion.TEXT_DESC: lambda a, b: -_compare_text(a, b),
    SortCriterion.SCHEDULED_TIME_ASC: _scheduled_comparator(1),
    SortCriterion.SCHEDULED_TIME_DESC: _scheduled_comparator(-1),
}


def sort_links(links: Iterable[Link], criterion: Union[SortCriterion, str, None]) -> List[Link]:
    """
    Return a new list ordered by `criterion`.

    The sort is stable. An unrecognized criterion leaves the input order as is.
    """
    ordered = list(links)
    crit = parse_criterion(criterion)
    if crit is None:
        return ordered
    ordered.sort(key=cmp_to_key(COMPARATORS[crit]))
    return ordered
