"""Mapper functions to convert between records and SQLAlchemy models.

This layer isolates the conversion logic so the record shape the domain
parses stays stable when the schema changes.
"""

from typing import Any

from catorcena.database.models import (
    Card as ORMCard,
    Charge as ORMCharge,
    DebitAccount as ORMDebitAccount,
    DebitMovement as ORMDebitMovement,
    Movement as ORMMovement,
)

MOVEMENT_FIELDS = (
    "kind",
    "amount",
    "description",
    "category",
    "recurrence",
    "frequency",
    "date",
    "start_date",
    "day_of_month",
    "day_of_week",
)

CHARGE_FIELDS = (
    "description",
    "amount",
    "purchase_date",
    "category",
    "recurrence",
    "frequency",
    "day_of_month",
    "day_of_week",
    "installment_months",
)

DEBIT_MOVEMENT_FIELDS = (
    "kind",
    "amount",
    "description",
    "recurrence",
    "frequency",
    "date",
    "start_date",
    "day_of_month",
    "day_of_week",
    "is_yield",
)


def column_values(record: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    """Pick the column values of a record, dropping unknown keys."""
    values = {field: record.get(field) for field in fields}
    if values.get("day_of_week") is not None:
        values["day_of_week"] = str(values["day_of_week"])
    if values.get("recurrence") is None:
        values["recurrence"] = "one-off"
    if "description" in values and values["description"] is None:
        values["description"] = ""
    return values


def movement_to_record(orm_movement: ORMMovement) -> dict[str, Any]:
    """Convert SQLAlchemy Movement model to a movement record."""
    record = {field: getattr(orm_movement, field) for field in MOVEMENT_FIELDS}
    record["id"] = str(orm_movement.id)
    return record


def charge_to_record(orm_charge: ORMCharge) -> dict[str, Any]:
    """Convert SQLAlchemy Charge model to a charge record."""
    record = {field: getattr(orm_charge, field) for field in CHARGE_FIELDS}
    record["id"] = str(orm_charge.id)
    return record


def card_to_record(orm_card: ORMCard) -> dict[str, Any]:
    """Convert SQLAlchemy Card model, with its charges, to a card record."""
    return {
        "id": str(orm_card.id),
        "name": orm_card.name,
        "cut_off_day": orm_card.cut_off_day,
        "grace_period_days": orm_card.grace_period_days,
        "credit_limit": orm_card.credit_limit,
        "charges": [charge_to_record(c) for c in orm_card.charges],
    }


def debit_movement_to_record(orm_movement: ORMDebitMovement) -> dict[str, Any]:
    """Convert SQLAlchemy DebitMovement model to a debit movement record."""
    record = {field: getattr(orm_movement, field) for field in DEBIT_MOVEMENT_FIELDS}
    record["id"] = str(orm_movement.id)
    return record


def debit_account_to_record(orm_account: ORMDebitAccount) -> dict[str, Any]:
    """Convert SQLAlchemy DebitAccount model, with its movements, to a record."""
    return {
        "id": str(orm_account.id),
        "name": orm_account.name,
        "yield": {
            "enabled": orm_account.yield_enabled,
            "annual_rate_percent": orm_account.annual_rate_percent,
            "capped": orm_account.capped,
            "cap_amount": orm_account.cap_amount,
            "accrual_frequency": orm_account.accrual_frequency,
            "last_accrual_date": orm_account.last_accrual_date,
        },
        "movements": [debit_movement_to_record(m) for m in orm_account.movements],
    }


def debit_account_columns(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten an account record's yield mapping into column values."""
    settings = record.get("yield") or {}
    return {
        "name": record.get("name"),
        "yield_enabled": bool(settings.get("enabled")),
        "annual_rate_percent": settings.get("annual_rate_percent") or 0,
        "capped": bool(settings.get("capped")),
        "cap_amount": settings.get("cap_amount"),
        "accrual_frequency": settings.get("accrual_frequency") or "monthly",
        "last_accrual_date": settings.get("last_accrual_date"),
    }
