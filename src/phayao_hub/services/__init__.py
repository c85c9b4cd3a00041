# src/phayao_hub/services/__init__.py
"""View counting and client session services for the Phayao Hub application."""

from .session_clock import FileStorage, MemoryStorage, SessionClock, StorageUnavailableError
from .session_watcher import ActivityFeed, SessionWatcher
from .view_guard import ViewCountGuard, marker_name
from .views import ItemNotFoundError, increment_view_count

__all__ = [
    "SessionClock",
    "MemoryStorage",
    "FileStorage",
    "StorageUnavailableError",
    "ActivityFeed",
    "SessionWatcher",
    "ViewCountGuard",
    "marker_name",
    "ItemNotFoundError",
    "increment_view_count",
]
