"""
Key-Value Stores
=================
Persistence collaborators: string keys to string values.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .log import get_logger

logger = get_logger("storage")


class StorageError(OSError):
    """The backing store could not be read or written."""


class KeyValueStore(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def flush(self) -> None: ...


class MemoryStore:
    """Dict-backed store. Used in tests and as the no-durability fallback."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def flush(self) -> None:
        pass


class JsonFileStore:
    """
    All keys live in a single JSON object file.

    The file is read lazily on first access. Writes go through a temp file
    and os.replace so a crash never leaves a half-written file. With
    autoflush off, saves only mark the cache dirty and flush() writes it.
    """

    def __init__(self, path: str | Path, autoflush: bool = True) -> None:
        self.path = Path(path)
        self.autoflush = autoflush
        self._cache: Optional[Dict[str, str]] = None
        self._dirty = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    def _read(self) -> Dict[str, str]:
        if self._cache is not None:
            return self._cache
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            self._cache = {}
            return self._cache
        except OSError as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Store file %s is corrupt; starting empty", self.path)
            data = {}
        if not isinstance(data, dict):
            data = {}
        self._cache = {str(k): str(v) for k, v in data.items()}
        return self._cache

    def _write(self) -> None:
        data = self._read()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StorageError(f"cannot write {self.path}: {exc}") from exc

    def _changed(self) -> None:
        self._dirty = True
        if self.autoflush:
            self.flush()

    def load(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def save(self, key: str, value: str) -> None:
        self._read()[key] = value
        self._changed()

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._changed()

    def flush(self) -> None:
        """Write pending changes to disk. No-op when nothing changed."""
        if not self._dirty:
            return
        self._write()
        self._dirty = False
