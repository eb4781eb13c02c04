"""
Client storage for persisted state blobs

Holds the JSON blobs the storefront UI keeps in browser storage
(``cart``, ``userInfo``). Two backends: in-memory and one-file-per-key.

Author: TM3
Date: 2026-10-15
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Any

from shopassist.core.exceptions import LocalStateError

logger = logging.getLogger(__name__)


class ClientStorage:
    """Key/value string storage with the browser storage interface"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def get_json(self, key: str) -> Optional[Any]:
        """
        Parse the blob stored under ``key``.

        Returns None when the key is missing; raises LocalStateError when
        the stored value is not valid JSON.
        """
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            raise LocalStateError(f"Stored '{key}' is not valid JSON: {e}") from e

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, ensure_ascii=False))


class MemoryStorage(ClientStorage):
    """Process-local storage, used by tests and single-request contexts"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(ClientStorage):
    """Stores each key as ``<directory>/<key>.json``"""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding='utf-8')

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.info(f"Removed stored state '{key}'")
