"""In-memory and file-backed store implementations."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from cachemigrate.cache.base import CacheStore
from cachemigrate.core.exceptions import CacheStoreError

logger = logging.getLogger(__name__)


class InMemoryStore(CacheStore):
    """Process-local store, mainly for tests and embedding."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class FileStore(CacheStore):
    """Store persisted as one JSON object mapping keys to text values.

    A missing file is an empty store. A file that is not a JSON object
    of strings is logged and treated as empty rather than crashing
    startup; the next write replaces it. Writes go to a temporary file
    that is renamed over the original.
    """

    def __init__(self, path: Path | str):
        """Initialize the file store.

        Args:
            path: Location of the JSON file
        """
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            logger.warning(f"Ignoring unreadable store file {self.path}: {e}")
            return {}
        except OSError as e:
            raise CacheStoreError(
                f"Failed to read store file {self.path}",
                path=str(self.path),
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: not a JSON object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise CacheStoreError(
                f"Failed to write store file {self.path}",
                path=str(self.path),
                original_error=e,
            ) from e

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read_all()
            items[key] = value
            self._write_all(items)

    def remove_item(self, key: str) -> bool:
        with self._lock:
            items = self._read_all()
            if key not in items:
                return False
            del items[key]
            self._write_all(items)
            return True
