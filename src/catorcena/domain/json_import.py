"""JSON import domain service."""

import json
from datetime import date
from pathlib import Path
from typing import Any

import structlog

from catorcena.database.base import Database
from catorcena.domain.card import CardService
from catorcena.domain.debit import DebitAccountService
from catorcena.domain.errors import DomainError
from catorcena.domain.movement import MovementService
from catorcena.domain.paid import PaidService
from catorcena.domain.records import parse_paid_mark

logger = structlog.get_logger()


class JsonImportService:
    """Service for importing a JSON export of movements, cards and debit accounts.

    The document is an object with optional "movements", "cards",
    "debit_accounts" and "paid_marks" lists. Cards carry a nested "charges"
    list and debit accounts a nested "movements" list and "yield" mapping.
    """

    def __init__(self, db: Database):
        """Initialize JSON import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.movement_service = MovementService(db)
        self.card_service = CardService(db)
        self.debit_service = DebitAccountService(db)
        self.paid_service = PaidService(db)

    def import_file(self, json_file_path: str, today: date) -> dict[str, Any]:
        """Import records from a JSON file.

        Args:
            json_file_path: Path to JSON file
            today: Day used as the accrual start of accounts without one

        Returns:
            Dict with import statistics:
            - imported: number of records imported
            - errors: list of error messages

        Raises:
            FileNotFoundError: If the JSON file doesn't exist
            ValueError: If the file is not a JSON object
        """
        json_path = Path(json_file_path)
        if not json_path.exists():
            raise FileNotFoundError(f"JSON file not found: {json_file_path}")

        with open(json_path, "r", encoding="utf-8-sig") as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {json_file_path}: {e}")

        return self.import_document(document, today)

    def import_document(self, document: Any, today: date) -> dict[str, Any]:
        """Import records from an already decoded JSON document.

        A record that fails validation is skipped and reported in errors;
        the remaining records are still imported.
        """
        if not isinstance(document, dict):
            raise ValueError("JSON document must be an object")

        imported = 0
        errors: list[str] = []

        for i, record in enumerate(document.get("movements") or (), start=1):
            try:
                self.movement_service.create_movement(record)
                imported += 1
            except (DomainError, AttributeError, TypeError) as e:
                errors.append(f"movements[{i}]: {e}")

        for i, record in enumerate(document.get("cards") or (), start=1):
            try:
                card_id = self.card_service.create_card(
                    name=record.get("name"),
                    cut_off_day=record.get("cut_off_day"),
                    grace_period_days=record.get("grace_period_days") or 0,
                    credit_limit=record.get("credit_limit") or 0,
                )
                imported += 1
            except (DomainError, AttributeError, TypeError) as e:
                errors.append(f"cards[{i}]: {e}")
                continue
            for j, charge in enumerate(record.get("charges") or (), start=1):
                try:
                    self.card_service.add_charge(card_id, charge)
                    imported += 1
                except (DomainError, AttributeError, TypeError) as e:
                    errors.append(f"cards[{i}].charges[{j}]: {e}")

        for i, record in enumerate(document.get("debit_accounts") or (), start=1):
            try:
                account_id = self.debit_service.create_account(
                    name=record.get("name"),
                    today=today,
                    yield_settings=record.get("yield"),
                )
                imported += 1
            except (DomainError, AttributeError, TypeError) as e:
                errors.append(f"debit_accounts[{i}]: {e}")
                continue
            for j, movement in enumerate(record.get("movements") or (), start=1):
                try:
                    self.debit_service.add_movement(account_id, movement)
                    imported += 1
                except (DomainError, AttributeError, TypeError) as e:
                    errors.append(f"debit_accounts[{i}].movements[{j}]: {e}")

        for i, record in enumerate(document.get("paid_marks") or (), start=1):
            try:
                mark = parse_paid_mark(record)
                self.paid_service.set_paid(mark.year, mark.period_index, mark.item_id, True)
                imported += 1
            except DomainError as e:
                errors.append(f"paid_marks[{i}]: {e}")

        logger.info("json_imported", imported=imported, errors=len(errors))
        return {"imported": imported, "errors": errors}
