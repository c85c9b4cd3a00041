"""Cookie-backed deduplication of detail-page view counts.

A client contributes at most one view per item per marker lifetime. The
marker is a plain cookie whose presence means "already counted"; the server
keeps no dedup table. Two near-simultaneous first requests from the same
client can both observe "no marker" and both increment; view counts are
best-effort, not exactly-once.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Final

from starlette.requests import Request
from starlette.responses import Response

from phayao_hub.core.settings import settings

logger = logging.getLogger(__name__)

MARKER_VALUE: Final[str] = "true"

IncrementCallback = Callable[[], Awaitable[object] | object]


def marker_name(item_type: str, item_id: int | str, prefix: str = "viewed") -> str:
    """Return the cookie name that marks `(item_type, item_id)` as counted."""
    return f"{prefix}_{item_type}_{item_id}"


class ViewCountGuard:
    """Wrap a view counter increment so each client counts once per window."""

    def __init__(
        self,
        *,
        max_age_seconds: int = 30 * 60,
        secure: bool = False,
        prefix: str = "viewed",
    ) -> None:
        self.max_age_seconds = max_age_seconds
        self.secure = secure
        self.prefix = prefix

    def has_marker(self, request: Request, item_type: str, item_id: int | str) -> bool:
        """Return True if the request already carries the marker for this item."""
        return marker_name(item_type, item_id, self.prefix) in request.cookies

    async def guarded_increment(
        self,
        request: Request,
        response: Response,
        item_type: str,
        item_id: int | str,
        increment: IncrementCallback,
    ) -> bool:
        """Run `increment` unless this client has viewed the item recently.

        Args:
            request: Inbound request, read for an existing marker cookie.
            response: Outbound response the marker cookie is written to.
            item_type: Resource kind, e.g. "market", "job", "post", "guide", "profile".
            item_id: Internal identifier of the resource. Must not be user-controlled text.
            increment: Zero-argument callable performing exactly one increment.
                May be a plain function or return an awaitable.

        Returns:
            True if the view was counted, False if a marker suppressed it.

        Raises:
            ValueError: If `item_type` is empty.
            Exception: Whatever `increment` raises, unchanged. No marker is set.
        """
        if not item_type:
            raise ValueError("item_type must be a non-empty string")

        if self.has_marker(request, item_type, item_id):
            return False

        try:
            result = increment()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.error("Error incrementing view for %s %s", item_type, item_id, exc_info=True)
            raise

        response.set_cookie(
            key=marker_name(item_type, item_id, self.prefix),
            value=MARKER_VALUE,
            max_age=self.max_age_seconds,
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )
        return True


def get_view_guard() -> ViewCountGuard:
    """Return a view guard configured from application settings."""
    return ViewCountGuard(
        max_age_seconds=settings.view_marker_max_age_seconds,
        secure=settings.is_production,
        prefix=settings.view_marker_prefix,
    )
