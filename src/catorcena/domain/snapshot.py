"""Snapshot loading domain service."""

import structlog

from catorcena.database.base import Database
from catorcena.domain.entities import Snapshot
from catorcena.domain.records import build_snapshot

logger = structlog.get_logger()


class SnapshotService:
    """Service for loading an immutable snapshot of every stored record."""

    def __init__(self, db: Database):
        """Initialize snapshot service.

        Args:
            db: Database instance
        """
        self.db = db

    def load(self) -> Snapshot:
        """Load movements, cards, debit accounts and paid marks.

        Records that cannot be parsed are left out and reported in
        Snapshot.warnings.

        Returns:
            Snapshot of the store
        """
        snapshot = build_snapshot(
            movements=self.db.list_movements(),
            cards=self.db.list_cards(),
            debit_accounts=self.db.list_debit_accounts(),
            paid_marks=self.db.list_paid_marks(),
        )
        logger.debug(
            "snapshot_loaded",
            movements=len(snapshot.movements),
            cards=len(snapshot.cards),
            debit_accounts=len(snapshot.debit_accounts),
            warnings=len(snapshot.warnings),
        )
        return snapshot
