"""Paid-mark overlay domain service.

A mark flags one item occurrence as covered in one period. The overlay is
keyed by (year, period_index, item_id) only; no mark means unpaid. Toggles
read then write, so concurrent toggles resolve last-write-wins.
"""

from typing import Optional

import structlog

from catorcena.database.base import Database
from catorcena.domain.entities import PaidMark
from catorcena.domain.errors import ValidationError
from catorcena.domain.periods import PERIODS_PER_YEAR

logger = structlog.get_logger()


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate(year: int, period_index: int, item_id: str) -> None:
    if not _is_int(year) or not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year: {year!r}")
    if not _is_int(period_index) or not 0 <= period_index < PERIODS_PER_YEAR:
        raise ValidationError(f"Invalid period index: {period_index!r}")
    if not item_id or not str(item_id).strip():
        raise ValidationError("Item id must not be empty")


class PaidService:
    """Service for marking period items as paid."""

    def __init__(self, db: Database):
        """Initialize paid service.

        Args:
            db: Database instance
        """
        self.db = db

    def is_paid(self, year: int, period_index: int, item_id: str) -> bool:
        """Check whether an item is marked as paid in a period."""
        _validate(year, period_index, item_id)
        return self.db.is_paid(year, period_index, item_id)

    def set_paid(self, year: int, period_index: int, item_id: str, paid: bool) -> None:
        """Mark or unmark an item in a period.

        Args:
            year: Year of the period grid
            period_index: Index of the period within its year grid
            item_id: Item identifier as shown in the period summary
            paid: New state

        Raises:
            ValidationError: If the year, period index or item id is invalid
        """
        _validate(year, period_index, item_id)
        self.db.set_paid(year, period_index, item_id, paid)
        logger.info("paid_mark_set", year=year, period_index=period_index, item_id=item_id, paid=paid)

    def toggle(self, year: int, period_index: int, item_id: str) -> bool:
        """Flip the paid state of an item in a period.

        Toggling twice restores the original state.

        Returns:
            The new paid state
        """
        paid = not self.is_paid(year, period_index, item_id)
        self.set_paid(year, period_index, item_id, paid)
        return paid

    def list_marks(self, year: Optional[int] = None) -> list[PaidMark]:
        """List paid marks ordered by year, period and item, optionally for one year."""
        return [
            PaidMark(year=mark_year, period_index=index, item_id=item_id)
            for mark_year, index, item_id in self.db.list_paid_marks()
            if year is None or mark_year == year
        ]
