"""Parsing of raw store records into domain entities.

Records are plain mappings as the store hands them over (string or native
dates, string or numeric amounts, Spanish or English frequency names).
Parsing a single record raises a DomainError; building a snapshot never
raises for a bad record; it drops the record and reports a DataWarning,
since a silently missing record would understate totals.
"""

import unicodedata
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

import structlog

from catorcena.domain.entities import (
    AccrualFrequency,
    Biweekly,
    CardAccount,
    Charge,
    Daily,
    DataWarning,
    DebitAccount,
    DebitMovement,
    InstallmentPlan,
    Monthly,
    Movement,
    MovementKind,
    OneOff,
    PaidMark,
    Recurrence,
    Snapshot,
    Weekly,
    YieldConfig,
)
from catorcena.domain.errors import (
    DomainError,
    InvalidInstallmentPlan,
    InvalidRecurrenceConfig,
    InvalidWeekday,
    ValidationError,
    invalid_installment_months,
    missing_recurrence_field,
    unknown_frequency,
)
from catorcena.utils.amount_parser import coerce_amount
from catorcena.utils.date_parser import coerce_date
from catorcena.utils.dates import resolve_weekday

logger = structlog.get_logger()

KIND_ALIASES = {
    "income": MovementKind.INCOME,
    "ingreso": MovementKind.INCOME,
    "expense": MovementKind.EXPENSE,
    "gasto": MovementKind.EXPENSE,
}

ONE_OFF_NAMES = {"one-off", "oneoff", "once", "unico", "single"}
RECURRING_NAMES = {"recurring", "recurrente"}

FREQUENCY_ALIASES = {
    "daily": Daily,
    "diario": Daily,
    "weekly": Weekly,
    "semanal": Weekly,
    "biweekly": Biweekly,
    "catorcenal": Biweekly,
    "fortnightly": Biweekly,
    "monthly": Monthly,
    "mensual": Monthly,
}

ACCRUAL_ALIASES = {
    "daily": AccrualFrequency.DAILY,
    "diario": AccrualFrequency.DAILY,
    "monthly": AccrualFrequency.MONTHLY,
    "mensual": AccrualFrequency.MONTHLY,
}


def _key(value: Any) -> str:
    decomposed = unicodedata.normalize("NFKD", str(value).strip().lower())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _date_field(record: Mapping[str, Any], field: str) -> date:
    try:
        return coerce_date(record.get(field))
    except ValueError as e:
        raise ValidationError(f"Invalid date in '{field}': {e}")


def _amount_field(record: Mapping[str, Any], field: str = "amount") -> Decimal:
    try:
        amount = coerce_amount(record.get(field))
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {e}")
    if amount < 0:
        raise ValidationError(f"Invalid {field}: must not be negative")
    return amount


def _int_field(record: Mapping[str, Any], field: str, default: Optional[int] = None) -> Optional[int]:
    value = record.get(field)
    if _blank(value):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid {field}: '{value}'")


def parse_kind(value: Any) -> MovementKind:
    """Resolve a movement kind name."""
    kind = KIND_ALIASES.get(_key(value)) if not _blank(value) else None
    if kind is None:
        raise ValidationError(f"Unknown movement kind '{value}'")
    return kind


def parse_recurrence(
    record: Mapping[str, Any],
    *,
    date_field: str = "date",
    start_field: str = "start_date",
    require_day_of_month: bool = True,
) -> Recurrence:
    """Build the recurrence variant described by a record.

    A record is recurring when its "recurrence" is recurring (or, lacking
    that, when it names a frequency). One-off records need date_field;
    recurring ones need start_field plus day_of_week (weekly) or
    day_of_month (monthly, unless require_day_of_month is False).

    Raises:
        ValidationError: If a required date is missing or malformed
        InvalidRecurrenceConfig: If the frequency or one of its fields is invalid
    """
    recurrence = record.get("recurrence")
    frequency = record.get("frequency")
    if _blank(recurrence):
        recurring = not _blank(frequency) and _key(frequency) not in ONE_OFF_NAMES
    else:
        name = _key(recurrence)
        if name in ONE_OFF_NAMES:
            recurring = False
        elif name in RECURRING_NAMES:
            recurring = True
        else:
            raise InvalidRecurrenceConfig(f"Unknown recurrence '{recurrence}'")

    if not recurring:
        return OneOff(_date_field(record, date_field))

    variant = FREQUENCY_ALIASES.get(_key(frequency)) if not _blank(frequency) else None
    if variant is None:
        raise InvalidRecurrenceConfig(unknown_frequency(frequency))

    start = _date_field(record, start_field)

    if variant is Weekly:
        day_name = record.get("day_of_week")
        if _blank(day_name):
            raise InvalidRecurrenceConfig(missing_recurrence_field("weekly", "day_of_week"))
        try:
            return Weekly(start_date=start, day_of_week=resolve_weekday(day_name))
        except InvalidWeekday as e:
            raise InvalidRecurrenceConfig(str(e))

    if variant is Monthly:
        try:
            day = _int_field(record, "day_of_month")
        except ValidationError as e:
            raise InvalidRecurrenceConfig(str(e))
        if day is None and require_day_of_month:
            raise InvalidRecurrenceConfig(missing_recurrence_field("monthly", "day_of_month"))
        if day is not None and not 1 <= day <= 31:
            raise InvalidRecurrenceConfig(f"day_of_month out of range: {day}")
        return Monthly(start_date=start, day_of_month=day)

    return variant(start_date=start)


def parse_movement(record: Mapping[str, Any]) -> Movement:
    """Build a Movement from a record.

    Raises:
        DomainError: If the record is invalid
    """
    if _blank(record.get("id")):
        raise ValidationError("Movement record has no id")
    return Movement(
        id=str(record["id"]),
        kind=parse_kind(record.get("kind")),
        amount=_amount_field(record),
        description=str(record.get("description") or ""),
        recurrence=parse_recurrence(record),
        category=record.get("category") or None,
    )


def parse_installments(record: Mapping[str, Any]) -> Optional[InstallmentPlan]:
    """Return the MSI plan of a charge record, or None.

    Raises:
        InvalidInstallmentPlan: If the month count is missing or not positive
    """
    months = record.get("installment_months")
    flagged = bool(record.get("is_installment"))
    if _blank(months):
        if flagged:
            raise InvalidInstallmentPlan(invalid_installment_months(months))
        return None
    try:
        count = int(str(months).strip())
    except ValueError:
        raise InvalidInstallmentPlan(invalid_installment_months(months))
    if count <= 0:
        raise InvalidInstallmentPlan(invalid_installment_months(count))
    return InstallmentPlan(months=count)


def parse_charge(record: Mapping[str, Any], position: int = 0) -> Charge:
    """Build a Charge from a record.

    The purchase date doubles as the start date of a recurring charge, and
    an MSI plan makes the recurrence irrelevant.

    Raises:
        DomainError: If the record is invalid
    """
    purchase_field = "purchase_date" if not _blank(record.get("purchase_date")) else "date"
    purchase = _date_field(record, purchase_field)
    installments = parse_installments(record)
    if installments is not None:
        recurrence: Recurrence = OneOff(purchase)
    else:
        recurrence = parse_recurrence(
            {**record, "date": purchase, "start_date": purchase},
            require_day_of_month=False,
        )
    charge_id = record.get("id")
    return Charge(
        id=str(position) if _blank(charge_id) else str(charge_id),
        description=str(record.get("description") or ""),
        amount=_amount_field(record),
        purchase_date=purchase,
        recurrence=recurrence,
        installments=installments,
        category=record.get("category") or None,
    )


def parse_card(
    record: Mapping[str, Any], warnings: Optional[list[DataWarning]] = None
) -> CardAccount:
    """Build a CardAccount from a record.

    Invalid charges are dropped and reported to warnings when given;
    without a warnings list the first invalid charge raises.

    Raises:
        DomainError: If the card itself is invalid
    """
    if _blank(record.get("id")):
        raise ValidationError("Card record has no id")
    card_id = str(record["id"])
    cut_off_day = _int_field(record, "cut_off_day")
    if cut_off_day is None or not 1 <= cut_off_day <= 31:
        raise ValidationError(f"Invalid cut_off_day: '{record.get('cut_off_day')}'")
    grace = _int_field(record, "grace_period_days", default=0)
    if grace < 0:
        raise ValidationError(f"Invalid grace_period_days: {grace}")
    limit = record.get("credit_limit")
    credit_limit = Decimal("0") if _blank(limit) else _amount_field(record, "credit_limit")

    charges = []
    for position, charge_record in enumerate(record.get("charges") or ()):
        try:
            charges.append(parse_charge(charge_record, position))
        except DomainError as e:
            if warnings is None:
                raise
            warnings.append(_warn("charge", f"{card_id}-{position}", e))

    return CardAccount(
        id=card_id,
        name=str(record.get("name") or ""),
        cut_off_day=cut_off_day,
        grace_period_days=grace,
        credit_limit=credit_limit,
        charges=tuple(charges),
    )


def parse_yield_config(record: Optional[Mapping[str, Any]]) -> YieldConfig:
    """Build a YieldConfig from the "yield" mapping of an account record."""
    if not record:
        return YieldConfig()
    enabled = bool(record.get("enabled"))
    rate = record.get("annual_rate_percent")
    capped = bool(record.get("capped"))
    cap = record.get("cap_amount")
    frequency = record.get("accrual_frequency")
    accrual = ACCRUAL_ALIASES.get(_key(frequency)) if not _blank(frequency) else AccrualFrequency.MONTHLY
    if accrual is None:
        raise InvalidRecurrenceConfig(unknown_frequency(frequency))
    last = record.get("last_accrual_date")
    return YieldConfig(
        enabled=enabled,
        annual_rate_percent=Decimal("0") if _blank(rate) else _amount_field(record, "annual_rate_percent"),
        capped=capped,
        cap_amount=None if _blank(cap) else _amount_field(record, "cap_amount"),
        accrual_frequency=accrual,
        last_accrual_date=None if _blank(last) else _date_field(record, "last_accrual_date"),
    )


def parse_debit_movement(record: Mapping[str, Any]) -> DebitMovement:
    """Build a DebitMovement from a record.

    Raises:
        DomainError: If the record is invalid
    """
    if _blank(record.get("id")):
        raise ValidationError("Debit movement record has no id")
    return DebitMovement(
        id=str(record["id"]),
        kind=parse_kind(record.get("kind")),
        amount=_amount_field(record),
        description=str(record.get("description") or ""),
        recurrence=parse_recurrence(record),
        is_yield=bool(record.get("is_yield")),
    )


def parse_debit_account(
    record: Mapping[str, Any], warnings: Optional[list[DataWarning]] = None
) -> DebitAccount:
    """Build a DebitAccount from a record, dropping invalid movements into warnings."""
    if _blank(record.get("id")):
        raise ValidationError("Debit account record has no id")
    account_id = str(record["id"])
    movements = []
    for position, movement_record in enumerate(record.get("movements") or ()):
        try:
            movements.append(parse_debit_movement(movement_record))
        except DomainError as e:
            if warnings is None:
                raise
            record_id = movement_record.get("id") or f"{account_id}-{position}"
            warnings.append(_warn("debit_movement", str(record_id), e))

    return DebitAccount(
        id=account_id,
        name=str(record.get("name") or ""),
        yield_config=parse_yield_config(record.get("yield")),
        movements=tuple(movements),
    )


def parse_paid_mark(record: Any) -> PaidMark:
    """Build a PaidMark from a mapping or a (year, period_index, item_id) triple."""
    if isinstance(record, Mapping):
        year, period_index, item_id = record.get("year"), record.get("period_index"), record.get("item_id")
    else:
        try:
            year, period_index, item_id = record
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid paid mark: {record!r}")
    if _blank(item_id):
        raise ValidationError("Paid mark has no item_id")
    if _blank(year):
        raise ValidationError("Paid mark has no year")
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid year: '{year}'")
    try:
        return PaidMark(year=year, period_index=int(period_index), item_id=str(item_id))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid period_index: '{period_index}'")


def _warn(source: str, record_id: str, error: DomainError) -> DataWarning:
    event = "invalid_recurrence_config" if isinstance(error, InvalidRecurrenceConfig) else "invalid_record"
    logger.warning(event, source=source, record_id=record_id, reason=str(error))
    return DataWarning(source=source, record_id=record_id, message=str(error))


def build_snapshot(
    movements: Iterable[Mapping[str, Any]] = (),
    cards: Iterable[Mapping[str, Any]] = (),
    debit_accounts: Iterable[Mapping[str, Any]] = (),
    paid_marks: Iterable[Any] = (),
) -> Snapshot:
    """Parse raw store records into a Snapshot.

    Every record that cannot be parsed is excluded and reported in
    Snapshot.warnings.
    """
    warnings: list[DataWarning] = []

    parsed_movements = []
    for position, record in enumerate(movements):
        try:
            parsed_movements.append(parse_movement(record))
        except DomainError as e:
            warnings.append(_warn("movement", str(record.get("id") or position), e))

    parsed_cards = []
    for position, record in enumerate(cards):
        try:
            parsed_cards.append(parse_card(record, warnings))
        except DomainError as e:
            warnings.append(_warn("card", str(record.get("id") or position), e))

    parsed_accounts = []
    for position, record in enumerate(debit_accounts):
        try:
            parsed_accounts.append(parse_debit_account(record, warnings))
        except DomainError as e:
            warnings.append(_warn("debit_account", str(record.get("id") or position), e))

    marks = set()
    for position, record in enumerate(paid_marks):
        try:
            marks.add(parse_paid_mark(record))
        except DomainError as e:
            warnings.append(_warn("paid_mark", str(position), e))

    return Snapshot(
        movements=tuple(parsed_movements),
        cards=tuple(parsed_cards),
        debit_accounts=tuple(parsed_accounts),
        paid_marks=frozenset(marks),
        warnings=tuple(warnings),
    )


def recurrence_to_record(recurrence: Recurrence, *, date_field: str = "date") -> dict[str, Any]:
    """Serialize a recurrence into the flat record fields parse_recurrence reads."""
    if isinstance(recurrence, OneOff):
        return {"recurrence": "one-off", "frequency": None, date_field: recurrence.date}
    fields: dict[str, Any] = {
        "recurrence": "recurring",
        "frequency": recurrence.frequency.value,
        "start_date": recurrence.start_date,
    }
    if isinstance(recurrence, Weekly):
        fields["day_of_week"] = str(recurrence.day_of_week)
    elif isinstance(recurrence, Monthly):
        fields["day_of_month"] = recurrence.day_of_month
    return fields


def movement_to_record(movement: Movement) -> dict[str, Any]:
    """Serialize a Movement back into a store record."""
    return {
        "id": movement.id,
        "kind": movement.kind.value,
        "amount": movement.amount,
        "description": movement.description,
        "category": movement.category,
        **recurrence_to_record(movement.recurrence),
    }


def charge_to_record(charge: Charge) -> dict[str, Any]:
    """Serialize a Charge back into a store record."""
    record = {
        "id": charge.id,
        "description": charge.description,
        "amount": charge.amount,
        "purchase_date": charge.purchase_date,
        "category": charge.category,
        "installment_months": charge.installments.months if charge.installments else None,
        **recurrence_to_record(charge.recurrence),
    }
    # The purchase date is the anchor of every charge recurrence
    record.pop("date", None)
    record.pop("start_date", None)
    return record


def debit_movement_to_record(movement: DebitMovement) -> dict[str, Any]:
    """Serialize a DebitMovement back into a store record."""
    return {
        "id": movement.id,
        "kind": movement.kind.value,
        "amount": movement.amount,
        "description": movement.description,
        "is_yield": movement.is_yield,
        **recurrence_to_record(movement.recurrence),
    }


def yield_config_to_record(config: YieldConfig) -> dict[str, Any]:
    """Serialize a YieldConfig into the "yield" mapping of an account record."""
    return {
        "enabled": config.enabled,
        "annual_rate_percent": config.annual_rate_percent,
        "capped": config.capped,
        "cap_amount": config.cap_amount,
        "accrual_frequency": config.accrual_frequency.value,
        "last_accrual_date": config.last_accrual_date,
    }
