"""Credit card domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

import structlog

from catorcena.database.base import Database
from catorcena.domain.entities import CardAccount, Charge, InstallmentStatus
from catorcena.domain.errors import (
    ConflictError,
    InvalidInstallmentPlan,
    NotFoundError,
    ValidationError,
    card_not_found,
    charge_not_found,
    duplicate_name,
)
from catorcena.domain.installments import installment_status
from catorcena.domain.records import build_snapshot, charge_to_record, parse_card, parse_charge

logger = structlog.get_logger()


class CardService:
    """Service for managing credit cards and their charges."""

    def __init__(self, db: Database):
        """Initialize card service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_card(
        self,
        name: str,
        cut_off_day: int,
        grace_period_days: int = 0,
        credit_limit: Decimal | int | str = 0,
    ) -> str:
        """Create a new credit card.

        Args:
            name: Card name, unique among cards
            cut_off_day: Statement cut-off day of month (1-31)
            grace_period_days: Days from cut-off to payment due date
            credit_limit: Credit limit

        Returns:
            Card ID

        Raises:
            ValidationError: If a field is out of range
            ConflictError: If a card with the same name exists
        """
        if not name or not name.strip():
            raise ValidationError("Card name must not be empty")
        card = parse_card(
            {
                "id": "pending",
                "name": name,
                "cut_off_day": cut_off_day,
                "grace_period_days": grace_period_days,
                "credit_limit": credit_limit,
            }
        )
        if self.db.get_card_by_name(card.name) is not None:
            raise ConflictError(duplicate_name("Card", card.name))

        card_id = self.db.create_card(
            {
                "name": card.name,
                "cut_off_day": card.cut_off_day,
                "grace_period_days": card.grace_period_days,
                "credit_limit": card.credit_limit,
            }
        )
        logger.info("card_created", card_id=card_id, name=card.name)
        return card_id

    def get_card(self, card_id: str) -> CardAccount:
        """Get a card with its valid charges.

        Raises:
            NotFoundError: If the card does not exist
        """
        record = self.db.get_card(card_id)
        if record is None:
            raise NotFoundError(card_not_found(card_id))
        return parse_card(record, warnings=[])

    def find_card_id(self, reference: str) -> str:
        """Resolve a card ID or name to the card ID.

        Raises:
            NotFoundError: If no card matches
        """
        if self.db.get_card(reference) is not None:
            return str(reference)
        record = self.db.get_card_by_name(reference)
        if record is None:
            raise NotFoundError(card_not_found(reference))
        return str(record["id"])

    def list_cards(self) -> list[CardAccount]:
        """List every valid card."""
        return list(build_snapshot(cards=self.db.list_cards()).cards)

    def delete_card(self, card_id: str) -> None:
        """Delete a card together with its charges.

        Raises:
            NotFoundError: If the card does not exist
        """
        if self.db.get_card(card_id) is None:
            raise NotFoundError(card_not_found(card_id))
        self.db.delete_card(card_id)
        logger.info("card_deleted", card_id=card_id)

    def add_charge(self, card_id: str, record: Mapping[str, Any]) -> str:
        """Validate and append a charge to a card.

        Args:
            card_id: Card ID
            record: Charge fields (description, amount, purchase_date, category,
                recurrence, frequency, day_of_week, day_of_month,
                installment_months)

        Returns:
            Charge ID

        Raises:
            NotFoundError: If the card does not exist
            DomainError: If the charge is invalid
        """
        if self.db.get_card(card_id) is None:
            raise NotFoundError(card_not_found(card_id))
        charge = parse_charge({**record, "id": "pending"})
        stored = charge_to_record(charge)
        stored.pop("id")
        charge_id = self.db.add_charge(card_id, stored)
        logger.info(
            "charge_added",
            card_id=card_id,
            charge_id=charge_id,
            installments=charge.installments.months if charge.installments else None,
        )
        return charge_id

    def delete_charge(self, card_id: str, charge_id: str) -> None:
        """Delete a charge from a card.

        Raises:
            NotFoundError: If the card or the charge does not exist
        """
        record = self.db.get_card(card_id)
        if record is None:
            raise NotFoundError(card_not_found(card_id))
        if not any(str(c.get("id")) == str(charge_id) for c in record.get("charges") or ()):
            raise NotFoundError(charge_not_found(card_id, charge_id))
        self.db.delete_charge(card_id, charge_id)
        logger.info("charge_deleted", card_id=card_id, charge_id=charge_id)

    def total_spent(self, card: CardAccount) -> Decimal:
        """Sum the full amount of every charge on a card."""
        return sum((charge.amount for charge in card.charges), Decimal("0"))

    def available_credit(self, card: CardAccount) -> Decimal:
        """Return the credit limit minus the total spent."""
        return card.credit_limit - self.total_spent(card)

    def installment_plans(
        self, today: date, card_id: Optional[str] = None
    ) -> list[tuple[CardAccount, Charge, InstallmentStatus]]:
        """List MSI charges with their status relative to today.

        Args:
            today: Reference day for payments made and next payment
            card_id: Restrict to one card

        Returns:
            List of (card, charge, status) tuples in card and charge order
        """
        cards = [self.get_card(card_id)] if card_id is not None else self.list_cards()
        plans = []
        for card in cards:
            for charge in card.charges:
                if not charge.is_installment:
                    continue
                try:
                    plans.append((card, charge, installment_status(charge, card, today)))
                except InvalidInstallmentPlan as e:
                    logger.warning("invalid_installment_plan", charge_id=charge.id, reason=str(e))
        return plans
