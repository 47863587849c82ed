"""
Persistent key/value store.

Holds the species catalog, per-user saved collections, rate-limit
counters and cached generated images. Values are JSON-serializable.

Backends:
- InMemoryStore: process-local dict (development and tests)
- JsonFileStore: one JSON document per key under a directory
"""

import json
import logging
from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the backing store cannot be read or written."""


class KeyValueStore(ABC):
    """Abstract get/put/delete store keyed by string."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under key, or default."""
        pass

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key. Returns True if something was removed."""
        pass

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with prefix, sorted."""
        pass


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self._data[key] = deepcopy(value)

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class JsonFileStore(KeyValueStore):
    """
    File-backed store writing one `<key>.json` file per key.

    Keys are mapped to file names by percent-encoding their UTF-8 bytes
    (everything but letters, digits and `_.-~`), so the mapping is
    reversible.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create store directory {self.directory}: {e}")

    def _path(self, key: str) -> Path:
        encoded = quote(key, safe="")
        return self.directory / f"{encoded}.json"

    @staticmethod
    def _decode(stem: str) -> str:
        return unquote(stem)

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read {key}: {e}")

    def put(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            tmp_path.replace(path)
        except (OSError, TypeError) as e:
            raise StoreError(f"Failed to write {key}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreError(f"Failed to delete {key}: {e}")

    def keys(self, prefix: str = "") -> List[str]:
        found = [self._decode(p.stem) for p in self.directory.glob("*.json")]
        return sorted(k for k in found if k.startswith(prefix))


def create_store(backend: str, path: str) -> KeyValueStore:
    """Create a store for the configured backend name."""
    if backend == "memory":
        return InMemoryStore()
    if backend == "json":
        logger.info(f"Using JSON file store at {path}")
        return JsonFileStore(path)
    raise ValueError(f"Unknown store backend: {backend}")
