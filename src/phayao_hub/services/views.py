"""Atomic view counter increments used behind the view-count guard."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ItemNotFoundError(LookupError):
    """Raised when a counter increment matched no row."""

    def __init__(self, item_type: str, item_id: int) -> None:
        super().__init__(f"{item_type} {item_id} not found")
        self.item_type = item_type
        self.item_id = item_id


def increment_view_count(db: Session, model: Any, item_id: int) -> bool:
    """Add one to `model.view_count` for a row in a single UPDATE statement.

    Returns:
        True if a row was updated, False if `item_id` matched nothing.
    """
    result = db.execute(
        update(model)
        .where(model.id == item_id)
        .values(view_count=model.view_count + 1)
    )
    db.commit()
    return bool(result.rowcount)


def view_incrementer(
    db: Session, model: Any, item_type: str, item_id: int
) -> Callable[[], None]:
    """Return a zero-argument increment for `ViewCountGuard.guarded_increment`.

    The callable raises `ItemNotFoundError` when the row has disappeared, so
    the guard never issues a marker for a view that was not recorded.
    """

    def _increment() -> None:
        if not increment_view_count(db, model, item_id):
            raise ItemNotFoundError(item_type, item_id)
        logger.debug("Counted view for %s %s", item_type, item_id)

    return _increment
