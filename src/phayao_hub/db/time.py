# src/phayao_hub/db/time.py
"""UTC helpers for timestamp columns."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Default for `created_at`/`updated_at` columns."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from SQLite.

    Postgres and MySQL return aware values for timezone-aware columns while
    SQLite drops the offset, so mixed comparisons need one normal form.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
