"""Movement domain service."""

from typing import Any, Mapping

import structlog

from catorcena.database.base import Database
from catorcena.domain.entities import Movement
from catorcena.domain.errors import NotFoundError, movement_not_found
from catorcena.domain.records import build_snapshot, movement_to_record, parse_movement

logger = structlog.get_logger()

# Placeholder id so a record can be validated before the store assigns one
_PENDING_ID = "pending"


def _store_record(movement: Movement) -> dict[str, Any]:
    record = movement_to_record(movement)
    record.pop("id")
    return record


class MovementService:
    """Service for managing general income and expense movements."""

    def __init__(self, db: Database):
        """Initialize movement service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_movement(self, record: Mapping[str, Any]) -> str:
        """Validate and store a new movement.

        Args:
            record: Movement fields (kind, amount, description, category and
                the recurrence fields: recurrence, frequency, date, start_date,
                day_of_week, day_of_month)

        Returns:
            Movement ID

        Raises:
            ValidationError: If a field is missing or malformed
            InvalidRecurrenceConfig: If the recurrence is incomplete
        """
        movement = parse_movement({**record, "id": _PENDING_ID})
        movement_id = self.db.create_movement(_store_record(movement))
        logger.info("movement_created", movement_id=movement_id, kind=movement.kind.value)
        return movement_id

    def get_movement(self, movement_id: str) -> Movement:
        """Get a movement by ID.

        Raises:
            NotFoundError: If the movement does not exist
            DomainError: If the stored record is invalid
        """
        record = self.db.get_movement(movement_id)
        if record is None:
            raise NotFoundError(movement_not_found(movement_id))
        return parse_movement(record)

    def list_movements(self) -> list[Movement]:
        """List every valid movement in insertion order."""
        return list(build_snapshot(movements=self.db.list_movements()).movements)

    def update_movement(self, movement_id: str, changes: Mapping[str, Any]) -> Movement:
        """Update a movement in place, keeping its ID.

        Fields missing from changes (or None) keep their stored value.

        Returns:
            The updated movement

        Raises:
            NotFoundError: If the movement does not exist
            DomainError: If the updated movement is invalid
        """
        record = self.db.get_movement(movement_id)
        if record is None:
            raise NotFoundError(movement_not_found(movement_id))
        merged = dict(record)
        merged.update({key: value for key, value in changes.items() if value is not None})
        merged["id"] = movement_id
        movement = parse_movement(merged)
        self.db.update_movement(movement_id, _store_record(movement))
        logger.info("movement_updated", movement_id=movement_id)
        return movement

    def delete_movement(self, movement_id: str) -> None:
        """Delete a movement.

        Raises:
            NotFoundError: If the movement does not exist
        """
        if self.db.get_movement(movement_id) is None:
            raise NotFoundError(movement_not_found(movement_id))
        self.db.delete_movement(movement_id)
        logger.info("movement_deleted", movement_id=movement_id)
