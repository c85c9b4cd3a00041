"""Client-side session lifecycle clock.

Tracks two millisecond timestamps, login time and last activity time, in a
small key-value store and decides locally whether a signed-in client should
be treated as logged out. Two rules apply, each with the same timeout:

- inactivity: too long since the last recorded activity;
- absolute: too long since login, regardless of activity.

The server-side token expiry remains the authoritative security boundary;
this clock only drives the client's own logout.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from threading import Lock
from typing import Any, Final, Protocol

logger = logging.getLogger(__name__)

LOGIN_TIME_KEY: Final[str] = "loginTime"
LAST_ACTIVITY_KEY: Final[str] = "lastActivityTime"
DEFAULT_TIMEOUT_MS: Final[int] = 30 * 60 * 1000


class StorageUnavailableError(RuntimeError):
    """Raised when the backing key-value store cannot be read or written."""


class KeyValueStorage(Protocol):
    """String key-value storage in the shape of browser local storage.

    Implementations signal an unusable store by raising
    `StorageUnavailableError`. `SessionClock` converts any other exception a
    backend raises into that error, so a quota or permission failure in a
    third-party store is handled the same way.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage; contents vanish with the process."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """Storage persisted as a flat JSON object in a single file.

    Survives process restarts, so a client that comes back after a long
    pause sees the old timestamps and expires on its first check.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = Lock()

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as err:
            raise StorageUnavailableError(f"Cannot read {self.path}: {err}") from err
        try:
            data = json.loads(raw) if raw.strip() else {}
        except ValueError as err:
            raise StorageUnavailableError(f"Corrupt session store {self.path}") from err
        if not isinstance(data, dict):
            raise StorageUnavailableError(f"Corrupt session store {self.path}")
        return {str(key): str(value) for key, value in data.items()}

    def _dump(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as err:
            raise StorageUnavailableError(f"Cannot write {self.path}: {err}") from err

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._dump(data)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionClock:
    """Login and last-activity timestamps with inactivity and absolute expiry."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Callable[[], int] = _now_ms,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self.timeout_ms = timeout_ms

    @staticmethod
    def _store(operation: Callable[..., Any], *args: str) -> Any:
        try:
            return operation(*args)
        except StorageUnavailableError:
            raise
        except Exception as err:
            raise StorageUnavailableError(f"{type(err).__name__}: {err}") from err

    def init(self) -> None:
        """Start a session: set both timestamps to now.

        Called after login and after registration. Calling it again resets
        both timestamps.

        Raises:
            StorageUnavailableError: If the timestamps cannot be stored.
        """
        now = str(self.clock())
        self._store(self.storage.set_item, LAST_ACTIVITY_KEY, now)
        self._store(self.storage.set_item, LOGIN_TIME_KEY, now)

    def record_activity(self) -> None:
        """Move the last-activity timestamp to now."""
        try:
            self._store(self.storage.set_item, LAST_ACTIVITY_KEY, str(self.clock()))
        except StorageUnavailableError as err:
            # A lost write only makes the next expiry check fail safe.
            logger.warning("Could not record session activity: %s", err)

    def clear(self) -> None:
        """Remove both timestamps."""
        for key in (LAST_ACTIVITY_KEY, LOGIN_TIME_KEY):
            try:
                self._store(self.storage.remove_item, key)
            except StorageUnavailableError as err:
                logger.warning("Could not clear session key %s: %s", key, err)

    def _read(self, key: str) -> int | None:
        try:
            value = self._store(self.storage.get_item, key)
        except StorageUnavailableError as err:
            logger.warning("Session storage unavailable: %s", err)
            return None
        if value is None:
            return None
        try:
            return int(value, 10)
        except ValueError:
            return None

    @property
    def login_timestamp(self) -> int | None:
        return self._read(LOGIN_TIME_KEY)

    @property
    def last_activity_timestamp(self) -> int | None:
        return self._read(LAST_ACTIVITY_KEY)

    def is_expired(self) -> bool:
        """Return True if the session should be treated as logged out.

        Missing, non-numeric or unreadable timestamps count as expired.
        """
        last_activity = self.last_activity_timestamp
        login = self.login_timestamp
        if last_activity is None or login is None:
            return True

        now = self.clock()
        if now - last_activity > self.timeout_ms:
            return True
        return now - login > self.timeout_ms

    def time_remaining(self) -> int:
        """Return milliseconds left before the inactivity rule fires, never negative.

        Advisory only; `is_expired` is the authoritative decision.
        """
        last_activity = self.last_activity_timestamp
        if last_activity is None:
            return 0
        remaining = self.timeout_ms - (self.clock() - last_activity)
        return max(0, remaining)
