"""Periodic expiry checks and activity tracking for a signed-in client.

The host environment owns an `ActivityFeed` and calls `notify()` on every
qualifying interaction (pointer, key, scroll, touch). While a user is signed
in, a `SessionWatcher` keeps the feed subscribed to `SessionClock.record_activity`
and polls `SessionClock.is_expired` on a fixed interval. On expiry it tears
everything down and calls the logout callback exactly once.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Final

from phayao_hub.core.settings import settings
from phayao_hub.services.session_clock import SessionClock

logger = logging.getLogger(__name__)

ACTIVITY_EVENTS: Final[frozenset[str]] = frozenset(
    {"pointerdown", "keydown", "scroll", "touchstart"}
)

ActivityCallback = Callable[[str], None]
LogoutCallback = Callable[[], Awaitable[None] | None]


class Subscription:
    """Handle returned by `ActivityFeed.subscribe`; cancel to stop delivery."""

    def __init__(self, feed: ActivityFeed, callback: ActivityCallback) -> None:
        self._feed = feed
        self._callback = callback
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._feed._remove(self._callback)
            self.active = False


class ActivityFeed:
    """Fan-out of user activity notifications to explicit subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[ActivityCallback] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: ActivityCallback) -> Subscription:
        self._subscribers.append(callback)
        return Subscription(self, callback)

    def _remove(self, callback: ActivityCallback) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def notify(self, kind: str) -> None:
        """Deliver an activity event; kinds outside `ACTIVITY_EVENTS` are ignored."""
        if kind not in ACTIVITY_EVENTS:
            return
        for callback in list(self._subscribers):
            callback(kind)


class SessionWatcher:
    """Drives a `SessionClock` while a user is considered signed in."""

    def __init__(
        self,
        clock: SessionClock,
        feed: ActivityFeed,
        on_expired: LogoutCallback,
        *,
        interval_seconds: float | None = None,
    ) -> None:
        self.clock = clock
        self.feed = feed
        self.on_expired = on_expired
        self.interval_seconds = (
            settings.session_check_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        self._subscription: Subscription | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self._expired_fired = False

    @property
    def running(self) -> bool:
        return self._subscription is not None

    def _on_activity(self, kind: str) -> None:
        self.clock.record_activity()

    async def start(self) -> None:
        """Attach the activity listener and start periodic checks.

        Call after successful authentication, once `SessionClock.init()` has run.
        """
        if self._subscription is None:
            self._subscription = self.feed.subscribe(self._on_activity)
        self._expired_fired = False
        task = self._task
        if task is not None and not task.done() and self._stopping.is_set():
            # A previous loop is winding down after expiry or stop.
            if task is not asyncio.current_task():
                await task
            task = None
        if task is None or task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Detach the listener and stop checking, without calling the logout callback."""
        self._detach()
        task = self._task
        self._task = None
        if task is None:
            return
        self._stopping.set()
        if task is not asyncio.current_task():
            await task

    def _detach(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    async def check_now(self) -> bool:
        """Run one expiry check immediately.

        Returns:
            True if the session expired during this check.
        """
        if self._expired_fired or not self.clock.is_expired():
            return False

        self._expired_fired = True
        logger.info("Client session expired; signing out")
        self._detach()
        self.clock.clear()
        self._stopping.set()
        result = self.on_expired()
        if inspect.isawaitable(result):
            await result
        return True

    async def _run(self) -> None:
        interval = max(0.01, float(self.interval_seconds))
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
            if self._stopping.is_set():
                return
            try:
                expired = await self.check_now()
            except Exception:
                logger.error("Session logout callback failed", exc_info=True)
                return
            if expired:
                return
