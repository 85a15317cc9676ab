"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidWeekday(ValidationError):
    """Weekday name or ordinal could not be resolved."""


class InvalidRecurrenceConfig(ValidationError):
    """Recurrence frequency or one of its required fields is invalid."""


class InvalidInstallmentPlan(ValidationError):
    """Installment plan cannot be split (non-positive month count)."""


def movement_not_found(movement_id: str) -> str:
    """Return message for missing movement."""
    return f"Movement {movement_id} not found"


def card_not_found(card_id: str) -> str:
    """Return message for missing card account."""
    return f"Card {card_id} not found"


def charge_not_found(card_id: str, charge_id: str) -> str:
    """Return message for missing charge on a card."""
    return f"Charge {charge_id} not found on card {card_id}"


def debit_account_not_found(account_id: str) -> str:
    """Return message for missing debit account."""
    return f"Debit account {account_id} not found"


def debit_movement_not_found(account_id: str, movement_id: str) -> str:
    """Return message for missing debit movement."""
    return f"Movement {movement_id} not found in debit account {account_id}"


def duplicate_name(entity: str, name: str) -> str:
    """Return message for a duplicated entity name."""
    return f"{entity} with name '{name}' already exists"


def unknown_frequency(value: object) -> str:
    """Return message for an unrecognized recurrence frequency."""
    return f"Unknown frequency '{value}'"


def missing_recurrence_field(frequency: str, field: str) -> str:
    """Return message when a frequency-specific field is missing."""
    return f"Frequency '{frequency}' requires '{field}'"


def invalid_installment_months(months: object) -> str:
    """Return message for a non-positive installment month count."""
    return f"Installment plan needs a positive number of months, got {months}"
