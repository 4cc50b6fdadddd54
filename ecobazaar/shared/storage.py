"""
Persisted session storage.

The session is kept as two string entries (token and JSON user record) in a
key/value store that survives process restarts. SessionStore guarantees the
two entries are written and cleared together.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


@runtime_checkable
class ISessionStorage(Protocol):
    """Minimal string key/value store (the shape of browser localStorage)."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """Process-local storage. Used in tests and embedded clients."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage:
    """
    JSON-file backed storage.

    Every write rewrites the whole file through a temp file + rename, so a
    crash never leaves a half-written document behind. An unreadable file is
    treated as empty.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f)
            os.replace(tmp, self._path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)


class SessionStore:
    """
    The persisted half of the session: an opaque token and a JSON user record.

    Both entries are written and cleared together. Readers that find one
    without the other must treat the session as absent.
    """

    def __init__(
        self,
        storage: Optional[ISessionStorage] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self._storage = storage if storage is not None else MemoryStorage()
        self._token_key = settings.token_storage_key
        self._user_key = settings.user_storage_key

    @property
    def storage(self) -> ISessionStorage:
        return self._storage

    @property
    def token(self) -> Optional[str]:
        """Current bearer token, or None."""
        return self._storage.get_item(self._token_key) or None

    @property
    def raw_user(self) -> Optional[str]:
        """Serialized user record exactly as stored."""
        return self._storage.get_item(self._user_key) or None

    def read(self) -> tuple[Optional[str], Optional[str]]:
        """Return (token, raw_user)."""
        return self.token, self.raw_user

    def save(self, token: str, user: dict) -> None:
        """Persist a full session. On a failed write neither entry is kept."""
        encoded = json.dumps(user)
        try:
            self._storage.set_item(self._token_key, token)
            self._storage.set_item(self._user_key, encoded)
        except Exception:
            self.clear()
            raise

    def save_user(self, user: dict) -> None:
        """Rewrite only the user record (token unchanged)."""
        self._storage.set_item(self._user_key, json.dumps(user))

    def clear(self) -> None:
        """Remove both entries. Safe to call repeatedly."""
        self._storage.remove_item(self._token_key)
        self._storage.remove_item(self._user_key)
