"""Debit account domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

import structlog

from catorcena.database.base import Database
from catorcena.domain.entities import DebitAccount, DebitMovement, YieldPoint
from catorcena.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    debit_account_not_found,
    debit_movement_not_found,
    duplicate_name,
)
from catorcena.domain.records import (
    build_snapshot,
    debit_movement_to_record,
    parse_debit_account,
    parse_debit_movement,
    parse_yield_config,
    yield_config_to_record,
)
from catorcena.domain.yields import (
    account_balance,
    project_compound,
    projected_yield_total,
    settle_yield,
    yield_series,
)
from catorcena.utils.amount_parser import coerce_amount

logger = structlog.get_logger()


def _store_record(movement: DebitMovement) -> dict[str, Any]:
    record = debit_movement_to_record(movement)
    record.pop("id")
    return record


class DebitAccountService:
    """Service for managing debit accounts, their movements and yield."""

    def __init__(self, db: Database):
        """Initialize debit account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        today: date,
        yield_settings: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Create a new debit account.

        Args:
            name: Account name, unique among debit accounts
            today: Creation day; yield accrues from it unless the settings
                carry their own last_accrual_date
            yield_settings: Optional "yield" mapping (enabled,
                annual_rate_percent, capped, cap_amount, accrual_frequency,
                last_accrual_date)

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty or the settings are invalid
            ConflictError: If an account with the same name exists
        """
        if not name or not name.strip():
            raise ValidationError("Debit account name must not be empty")
        settings = dict(yield_settings or {})
        if not settings.get("last_accrual_date"):
            settings["last_accrual_date"] = today
        config = parse_yield_config(settings)
        if config.capped and config.cap_amount is None:
            raise ValidationError("A capped yield needs a cap amount")
        if self.db.get_debit_account_by_name(name) is not None:
            raise ConflictError(duplicate_name("Debit account", name))

        account_id = self.db.create_debit_account(
            {"name": name, "yield": yield_config_to_record(config)}
        )
        logger.info("debit_account_created", account_id=account_id, yield_enabled=config.enabled)
        return account_id

    def get_account(self, account_id: str) -> DebitAccount:
        """Get a debit account with its valid movements.

        Raises:
            NotFoundError: If the account does not exist
        """
        record = self.db.get_debit_account(account_id)
        if record is None:
            raise NotFoundError(debit_account_not_found(account_id))
        return parse_debit_account(record, warnings=[])

    def find_account_id(self, reference: str) -> str:
        """Resolve an account ID or name to the account ID.

        Raises:
            NotFoundError: If no account matches
        """
        if self.db.get_debit_account(reference) is not None:
            return str(reference)
        record = self.db.get_debit_account_by_name(reference)
        if record is None:
            raise NotFoundError(debit_account_not_found(reference))
        return str(record["id"])

    def list_accounts(self) -> list[DebitAccount]:
        """List every valid debit account."""
        return list(build_snapshot(debit_accounts=self.db.list_debit_accounts()).debit_accounts)

    def delete_account(self, account_id: str) -> None:
        """Delete a debit account together with its movements.

        Raises:
            NotFoundError: If the account does not exist
        """
        if self.db.get_debit_account(account_id) is None:
            raise NotFoundError(debit_account_not_found(account_id))
        self.db.delete_debit_account(account_id)
        logger.info("debit_account_deleted", account_id=account_id)

    def add_movement(self, account_id: str, record: Mapping[str, Any]) -> str:
        """Validate and append a movement to a debit account.

        Returns:
            Movement ID

        Raises:
            NotFoundError: If the account does not exist
            DomainError: If the movement is invalid
        """
        if self.db.get_debit_account(account_id) is None:
            raise NotFoundError(debit_account_not_found(account_id))
        movement = parse_debit_movement({**record, "id": "pending"})
        movement_id = self.db.add_debit_movement(account_id, _store_record(movement))
        logger.info("debit_movement_added", account_id=account_id, movement_id=movement_id)
        return movement_id

    def _movement_record(self, account_id: str, movement_id: str) -> dict[str, Any]:
        record = self.db.get_debit_account(account_id)
        if record is None:
            raise NotFoundError(debit_account_not_found(account_id))
        for movement in record.get("movements") or ():
            if str(movement.get("id")) == str(movement_id):
                return dict(movement)
        raise NotFoundError(debit_movement_not_found(account_id, movement_id))

    def update_movement(
        self, account_id: str, movement_id: str, changes: Mapping[str, Any]
    ) -> DebitMovement:
        """Update a debit movement in place; None values keep the stored field.

        Raises:
            NotFoundError: If the account or the movement does not exist
            DomainError: If the updated movement is invalid
        """
        merged = self._movement_record(account_id, movement_id)
        merged.update({key: value for key, value in changes.items() if value is not None})
        merged["id"] = movement_id
        movement = parse_debit_movement(merged)
        self.db.update_debit_movement(account_id, movement_id, _store_record(movement))
        logger.info("debit_movement_updated", account_id=account_id, movement_id=movement_id)
        return movement

    def delete_movement(self, account_id: str, movement_id: str) -> None:
        """Delete a debit movement, including settled yield entries.

        A deleted settled entry is not projected again, since settling has
        already advanced the account's last accrual date past it.

        Raises:
            NotFoundError: If the account or the movement does not exist
        """
        self._movement_record(account_id, movement_id)
        self.db.delete_debit_movement(account_id, movement_id)
        logger.info("debit_movement_deleted", account_id=account_id, movement_id=movement_id)

    def settle_yield(self, account_id: str, as_of: date) -> list[DebitMovement]:
        """Persist the current yield projection as income entries.

        Args:
            account_id: Debit account ID
            as_of: Accrual steps strictly before this day are settled

        Returns:
            The settled movements, with the IDs the store assigned
        """
        account = self.get_account(account_id)
        movements, next_date = settle_yield(account, as_of)
        settled = []
        for movement in movements:
            movement_id = self.db.add_debit_movement(account_id, _store_record(movement))
            settled.append(
                DebitMovement(
                    id=movement_id,
                    kind=movement.kind,
                    amount=movement.amount,
                    description=movement.description,
                    recurrence=movement.recurrence,
                    is_yield=True,
                )
            )
        if next_date is not None and next_date != account.yield_config.last_accrual_date:
            self.db.update_last_accrual_date(account_id, next_date)
        return settled

    def balance(self, account: DebitAccount, as_of: date) -> Decimal:
        """Return the balance of an account; projected yield is excluded."""
        return account_balance(account, as_of)

    def projected_yield(self, account: DebitAccount, as_of: date) -> Decimal:
        """Return the unsettled yield accrued up to as_of."""
        return projected_yield_total(account, as_of)

    def series(
        self,
        account: DebitAccount,
        as_of: date,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[YieldPoint]:
        """Return the dated income/expense/yield series of an account."""
        return yield_series(account, as_of, start, end)

    def project(
        self,
        account: DebitAccount,
        target_date: date,
        today: date,
        annual_rate_percent: Optional[Any] = None,
    ) -> Decimal:
        """Project the current balance to target_date with daily compounding.

        Args:
            account: Debit account to project
            target_date: Day to project to
            today: Day the current balance is taken on
            annual_rate_percent: Simulation rate; defaults to the account's
                rate, or 0 when yield is disabled

        Raises:
            ValidationError: If target_date is before today or the rate is invalid
        """
        if target_date < today:
            raise ValidationError("Projection date must not be before today")
        if annual_rate_percent is None:
            config = account.yield_config
            rate = config.annual_rate_percent if config.enabled else Decimal("0")
        else:
            try:
                rate = coerce_amount(annual_rate_percent)
            except ValueError as e:
                raise ValidationError(f"Invalid rate: {e}")
            if rate < 0:
                raise ValidationError("Invalid rate: must not be negative")
        return project_compound(self.balance(account, today), rate, target_date, today)
