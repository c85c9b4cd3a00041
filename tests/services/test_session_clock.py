# tests/services/test_session_clock.py
"""Tests for the client-side session clock and its storage backends."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from phayao_hub.services.session_clock import (
    DEFAULT_TIMEOUT_MS,
    LAST_ACTIVITY_KEY,
    LOGIN_TIME_KEY,
    FileStorage,
    MemoryStorage,
    SessionClock,
    StorageUnavailableError,
)

MINUTE_MS = 60 * 1000


class FakeClock:
    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class BrokenStorage:
    """Storage whose every operation fails."""

    def get_item(self, key: str) -> str | None:
        raise StorageUnavailableError("disabled")

    def set_item(self, key: str, value: str) -> None:
        raise StorageUnavailableError("disabled")

    def remove_item(self, key: str) -> None:
        raise StorageUnavailableError("disabled")


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def session_clock(storage: MemoryStorage, fake_clock: FakeClock) -> SessionClock:
    return SessionClock(storage, clock=fake_clock)


def test_default_timeout_is_thirty_minutes() -> None:
    assert DEFAULT_TIMEOUT_MS == 30 * MINUTE_MS


def test_init_sets_both_timestamps(session_clock, storage, fake_clock) -> None:
    session_clock.init()
    assert storage.get_item(LOGIN_TIME_KEY) == str(fake_clock.now)
    assert storage.get_item(LAST_ACTIVITY_KEY) == str(fake_clock.now)
    assert session_clock.login_timestamp == fake_clock.now
    assert session_clock.is_expired() is False


def test_init_resets_existing_session(session_clock, fake_clock) -> None:
    session_clock.init()
    fake_clock.advance(10 * MINUTE_MS)
    session_clock.init()
    assert session_clock.login_timestamp == fake_clock.now
    assert session_clock.last_activity_timestamp == fake_clock.now


def test_missing_timestamps_count_as_expired(session_clock, storage) -> None:
    assert session_clock.is_expired() is True
    storage.set_item(LAST_ACTIVITY_KEY, "1000000")
    assert session_clock.is_expired() is True


def test_unparseable_timestamp_counts_as_expired(session_clock, storage) -> None:
    session_clock.init()
    storage.set_item(LOGIN_TIME_KEY, "yesterday")
    assert session_clock.login_timestamp is None
    assert session_clock.is_expired() is True


def test_inactivity_rule(session_clock, fake_clock) -> None:
    session_clock.init()
    fake_clock.advance(30 * MINUTE_MS)
    assert session_clock.is_expired() is False  # exactly at the limit
    fake_clock.advance(1)
    assert session_clock.is_expired() is True


def test_activity_does_not_extend_absolute_lifetime(session_clock, fake_clock) -> None:
    session_clock.init()
    for _ in range(3):
        fake_clock.advance(10 * MINUTE_MS)
        session_clock.record_activity()
    assert session_clock.is_expired() is False

    fake_clock.advance(1)
    session_clock.record_activity()
    assert session_clock.is_expired() is True


def test_record_activity_moves_last_activity(session_clock, fake_clock) -> None:
    session_clock.init()
    fake_clock.advance(5 * MINUTE_MS)
    session_clock.record_activity()
    assert session_clock.last_activity_timestamp == fake_clock.now
    assert session_clock.login_timestamp == fake_clock.now - 5 * MINUTE_MS


def test_clear_removes_both_keys(session_clock, storage) -> None:
    session_clock.init()
    session_clock.clear()
    assert storage.get_item(LOGIN_TIME_KEY) is None
    assert storage.get_item(LAST_ACTIVITY_KEY) is None
    assert session_clock.is_expired() is True


def test_clear_is_idempotent(session_clock) -> None:
    session_clock.clear()
    session_clock.clear()
    assert session_clock.is_expired() is True


def test_time_remaining(session_clock, fake_clock) -> None:
    assert session_clock.time_remaining() == 0
    session_clock.init()
    fake_clock.advance(10 * MINUTE_MS)
    assert session_clock.time_remaining() == 20 * MINUTE_MS
    fake_clock.advance(40 * MINUTE_MS)
    assert session_clock.time_remaining() == 0


def test_custom_timeout(storage, fake_clock) -> None:
    clock = SessionClock(storage, clock=fake_clock, timeout_ms=1000)
    clock.init()
    fake_clock.advance(1001)
    assert clock.is_expired() is True


def test_unavailable_storage_fails_safe(fake_clock, caplog) -> None:
    clock = SessionClock(BrokenStorage(), clock=fake_clock)

    with pytest.raises(StorageUnavailableError):
        clock.init()

    clock.record_activity()
    clock.clear()
    assert clock.is_expired() is True
    assert "Could not record session activity" in caplog.text


class QuotaStorage(MemoryStorage):
    """Storage that accepts reads but rejects writes with a foreign error type."""

    def set_item(self, key: str, value: str) -> None:
        raise RuntimeError("QuotaExceededError")

    def remove_item(self, key: str) -> None:
        raise PermissionError("read-only store")


def test_foreign_backend_errors_are_treated_as_unavailable(fake_clock, caplog) -> None:
    clock = SessionClock(QuotaStorage(), clock=fake_clock)

    with pytest.raises(StorageUnavailableError, match="QuotaExceededError"):
        clock.init()

    clock.record_activity()
    clock.clear()
    assert clock.is_expired() is True
    assert "QuotaExceededError" in caplog.text
    assert "read-only store" in caplog.text


def test_foreign_read_error_counts_as_expired(fake_clock) -> None:
    class UnreadableStorage(MemoryStorage):
        def get_item(self, key: str) -> str | None:
            raise PermissionError("denied")

    assert SessionClock(UnreadableStorage(), clock=fake_clock).is_expired() is True


class TestFileStorage:
    def test_round_trip_through_disk(self, tmp_path: Path, fake_clock: FakeClock) -> None:
        path = tmp_path / "session.json"
        SessionClock(FileStorage(path), clock=fake_clock).init()

        reopened = SessionClock(FileStorage(path), clock=fake_clock)
        assert reopened.login_timestamp == fake_clock.now
        assert json.loads(path.read_text())[LOGIN_TIME_KEY] == str(fake_clock.now)

    def test_missing_file_reads_as_empty(self, tmp_path: Path) -> None:
        storage = FileStorage(tmp_path / "absent.json")
        assert storage.get_item(LOGIN_TIME_KEY) is None
        storage.remove_item(LOGIN_TIME_KEY)

    def test_corrupt_file_is_unavailable(self, tmp_path: Path, fake_clock: FakeClock) -> None:
        path = tmp_path / "session.json"
        path.write_text("{not json")
        storage = FileStorage(path)

        with pytest.raises(StorageUnavailableError):
            storage.get_item(LOGIN_TIME_KEY)
        assert SessionClock(storage, clock=fake_clock).is_expired() is True
