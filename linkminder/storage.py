import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from .migrate import normalize
from .models import Link, SortCriterion
from .sorting import parse_criterion

logger = logging.getLogger(__name__)

DEFAULT_LINKS_KEY = "links"
DEFAULT_SORT_KEY = "sortCriterion"

DEFAULT_LINKS = [
    {"text": "Google Search", "url": "https://www.google.com", "scheduledTime": "Tomorrow AM"},
    {"text": "Wikipedia Encyclopedia", "url": "https://www.wikipedia.org"},
    {"text": "Example Domain Info", "url": "https://www.example.com"},
    {"text": "Developer Mozilla", "url": "https://developer.mozilla.org"},
]


def default_links() -> List[Link]:
    return [normalize(raw) for raw in DEFAULT_LINKS]


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileKeyValueStore:
    """
    String key/value pairs kept in one JSON object file.

    The whole file is rewritten on every write, through a temporary file in
    the same directory that replaces the old one. A missing, unreadable or
    corrupt file reads as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Optional[Dict[str, str]]:
        """Stored pairs, or None when the file exists but cannot be decoded."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError):
            logger.warning("Could not read %s, treating it as empty", self.path)
            return None
        if not isinstance(data, dict):
            logger.warning("%s does not hold a JSON object, treating it as empty", self.path)
            return None
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _read(self) -> Dict[str, str]:
        data = self._load()
        return data if data is not None else {}

    def _read_for_update(self) -> Dict[str, str]:
        data = self._load()
        if data is not None:
            return data
        backup = self.path.with_name(self.path.name + ".corrupt")
        logger.warning("Discarding unreadable contents of %s, copy kept at %s", self.path, backup)
        try:
            shutil.copyfile(self.path, backup)
        except OSError:
            logger.warning("Could not copy %s to %s", self.path, backup)
        return {}

    def _write(self, data: Dict[str, str]) -> None:
        fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(data, indent=2))
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class PersistenceStore:
    def __init__(
        self,
        kv: KeyValueStore,
        links_key: str = DEFAULT_LINKS_KEY,
        sort_key: str = DEFAULT_SORT_KEY,
        default_sort: SortCriterion = SortCriterion.DATE_ADDED_DESC,
    ):
        self.kv = kv
        self.links_key = links_key
        self.sort_key = sort_key
        self.default_sort = default_sort

    def load_links(self) -> List[Link]:
        try:
            stored = self.kv.get_item(self.links_key)
        except Exception:
            logger.exception("Reading %r failed, using default links", self.links_key)
            return default_links()
        if stored is None:
            return default_links()
        try:
            data = json.loads(stored)
        except (TypeError, ValueError, RecursionError):
            logger.warning("Stored links are not valid JSON, using default links")
            return default_links()
        if not isinstance(data, list):
            logger.warning("Stored links are not a list, using default links")
            return default_links()
        return [normalize(raw) for raw in data]

    def save_links(self, links: List[Link]) -> None:
        try:
            payload = json.dumps([link.to_record() for link in links])
            self.kv.set_item(self.links_key, payload)
        except Exception:
            # in-memory links stay valid even though they were not written
            logger.exception("Saving %d links failed", len(links))

    def load_sort_criterion(self) -> SortCriterion:
        try:
            stored = self.kv.get_item(self.sort_key)
        except Exception:
            logger.debug("Reading sort criterion failed", exc_info=True)
            return self.default_sort
        return parse_criterion(stored) or self.default_sort

    def save_sort_criterion(self, criterion: SortCriterion) -> None:
        try:
            self.kv.set_item(self.sort_key, SortCriterion(criterion).value)
        except Exception:
            logger.debug("Saving sort criterion failed", exc_info=True)

    def export_raw(self) -> Optional[str]:
        try:
            return self.kv.get_item(self.links_key)
        except Exception:
            logger.debug("Reading %r failed", self.links_key, exc_info=True)
            return None
