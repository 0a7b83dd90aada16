# reweara/storefront/local_storage.py
"""
Client-local key-value storage.

Mirrors the browser's localStorage contract: string keys, string values,
missing keys read as None. Popup throttling and banner dismissals live here.
"""
import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class LocalStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-lifetime storage; what a private browsing window gets."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """
    Storage persisted as one JSON object on disk, so state survives
    across app loads.

    The file is read lazily on first access and rewritten on every change.
    An unreadable file is treated as empty.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                self._data = {str(k): str(v) for k, v in raw.items()}
            except FileNotFoundError:
                self._data = {}
            except (ValueError, AttributeError) as e:
                logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
                self._data = {}
        return self._data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._load(), sort_keys=True), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._load().pop(key, None) is not None:
            self._flush()
