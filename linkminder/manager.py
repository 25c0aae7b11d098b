import logging
from datetime import datetime
from typing import Callable, List, Optional

from .errors import InvalidLinkError, InvalidReminderError, LinkNotFoundError, UnknownSortCriterionError
from .models import AddLinkRequest, Link, RemoveLinkRequest, SetReminderRequest, SortCriterion
from .relative_time import now_ms, parse, to_iso, utcnow
from .sorting import parse_criterion, sort_links
from .storage import PersistenceStore

logger = logging.getLogger(__name__)

SCHEMES = ("http://", "https://")


def ensure_scheme(url: str, assume_https: bool = True) -> str:
    if url.lower().startswith(SCHEMES):
        return url
    if not assume_https:
        raise InvalidLinkError(f"URL must start with http:// or https://: {url}")
    return "https://" + url


class LinkManager:
    """
    The link collection, its active sort order and the store behind them.

    Every mutation writes the full collection back to the store before
    returning.
    """

    def __init__(
        self,
        store: PersistenceStore,
        links: Optional[List[Link]] = None,
        criterion: Optional[SortCriterion] = None,
        assume_https: bool = True,
        clock: Callable[[], int] = now_ms,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.links: List[Link] = list(links or [])
        self.criterion = criterion or store.default_sort
        self.assume_https = assume_https
        self.clock = clock
        self.now = now
        self._last_stamp = max((l.date_added for l in self.links), default=0)

    @classmethod
    def open(cls, store: PersistenceStore, **kwargs) -> "LinkManager":
        links = store.load_links()
        criterion = store.load_sort_criterion()
        logger.info("Loaded %d links, sorted by %s", len(links), criterion.value)
        return cls(store, links=links, criterion=criterion, **kwargs)

    def sorted_links(self, criterion=None) -> List[Link]:
        return sort_links(self.links, criterion if criterion is not None else self.criterion)

    def find(self, url: str, text: str) -> Optional[Link]:
        return next((l for l in self.links if l.key() == (url, text)), None)

    def _stamp(self) -> int:
        stamp = max(self.clock(), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    def add_link(self, req: AddLinkRequest) -> Link:
        text = req.text.strip()
        url = req.url.strip()
        if not text:
            raise InvalidLinkError("Link text cannot be empty")
        if not url:
            raise InvalidLinkError("Link URL cannot be empty")
        url = ensure_scheme(url, self.assume_https)

        link = Link(text=text, url=url, date_added=self._stamp())
        self.links.append(link)
        self.store.save_links(self.links)
        logger.info('New link "%s" (%s) added', link.text, link.url)
        return link

    def set_reminder(self, req: SetReminderRequest) -> Link:
        link = self.find(req.url, req.text)
        if link is None:
            raise LinkNotFoundError(req.url, req.text)

        if req.at is not None:
            # naive values are local wall-clock time from a calendar input
            try:
                at = req.at if req.at.tzinfo is not None else req.at.astimezone()
                actual = to_iso(at)
            except (OverflowError, ValueError):
                raise InvalidReminderError(f"Reminder time out of range: {req.at.isoformat()}")
            link.scheduled_date_time_actual = actual
            link.scheduled_time_display = None
            logger.info('Reminder for "%s" set to %s', link.text, link.scheduled_date_time_actual)
        elif req.reminder is None or not req.reminder.strip():
            link.scheduled_time_display = None
            link.scheduled_date_time_actual = None
            logger.info('Reminder for "%s" cleared', link.text)
        else:
            phrase = req.reminder.strip()
            instant = parse(phrase, self.now())
            link.scheduled_time_display = phrase
            link.scheduled_date_time_actual = to_iso(instant) if instant is not None else None
            logger.info('Reminder for "%s" set to: %s', link.text, phrase)

        self.store.save_links(self.links)
        return link

    def remove_link(self, req: RemoveLinkRequest) -> Link:
        link = self.find(req.url, req.text)
        if link is None:
            raise LinkNotFoundError(req.url, req.text)
        self.links.remove(link)
        self.store.save_links(self.links)
        logger.info('Link "%s" removed', link.text)
        return link

    def set_sort_criterion(self, value) -> SortCriterion:
        criterion = parse_criterion(value)
        if criterion is None:
            raise UnknownSortCriterionError(f"Unknown sort criterion: {value}")
        self.criterion = criterion
        self.store.save_sort_criterion(criterion)
        return criterion
