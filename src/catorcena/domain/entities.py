"""Domain model entities for catorcena.

These are pure data classes representing business concepts, independent of
the storage schema. Recurrence is modelled as one class per frequency so a
movement or charge can never carry fields that do not belong to its kind.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Union


class MovementKind(str, Enum):
    """Direction of a movement."""

    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Recurrence frequency names as stored."""

    ONE_OFF = "one-off"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class AccrualFrequency(str, Enum):
    """How often a debit account accrues yield."""

    DAILY = "daily"
    MONTHLY = "monthly"


class AmountModel(str, Enum):
    """How a recurring movement's amount is allocated to a period.

    ENUMERATED counts the calendar occurrences inside the period.
    SCALED applies the legacy per-period multipliers (daily x14, weekly x2).
    """

    ENUMERATED = "enumerated"
    SCALED = "scaled"


@dataclass(frozen=True)
class OneOff:
    """Single occurrence on a given date."""

    frequency: ClassVar[Frequency] = Frequency.ONE_OFF

    date: date


@dataclass(frozen=True)
class Daily:
    """Every day from start_date."""

    frequency: ClassVar[Frequency] = Frequency.DAILY

    start_date: date


@dataclass(frozen=True)
class Weekly:
    """Every week on day_of_week (Sunday = 0) from start_date."""

    frequency: ClassVar[Frequency] = Frequency.WEEKLY

    start_date: date
    day_of_week: int


@dataclass(frozen=True)
class Biweekly:
    """Every 14 days counted from start_date."""

    frequency: ClassVar[Frequency] = Frequency.BIWEEKLY

    start_date: date


@dataclass(frozen=True)
class Monthly:
    """Every month on day_of_month (clamped to the month length).

    day_of_month may be None for card charges, in which case the day of the
    start date is used.
    """

    frequency: ClassVar[Frequency] = Frequency.MONTHLY

    start_date: date
    day_of_month: Optional[int] = None


Recurrence = Union[OneOff, Daily, Weekly, Biweekly, Monthly]


def is_recurring(recurrence: Recurrence) -> bool:
    """Return True for every recurrence other than a one-off."""
    return not isinstance(recurrence, OneOff)


def base_date(recurrence: Recurrence) -> date:
    """Return the date a recurrence is anchored on (date or start date)."""
    if isinstance(recurrence, OneOff):
        return recurrence.date
    return recurrence.start_date


@dataclass(frozen=True)
class Movement:
    """General ledger income or expense."""

    id: str
    kind: MovementKind
    amount: Decimal
    description: str
    recurrence: Recurrence
    category: Optional[str] = None


@dataclass(frozen=True)
class InstallmentPlan:
    """MSI plan: the charge is split into `months` equal monthly dues."""

    months: int


@dataclass(frozen=True)
class Charge:
    """Single purchase or recurring charge on a credit card.

    id is opaque to the domain; the store numbers charges by position.
    """

    id: str
    description: str
    amount: Decimal
    purchase_date: date
    recurrence: Recurrence
    installments: Optional[InstallmentPlan] = None
    category: Optional[str] = None

    @property
    def is_installment(self) -> bool:
        return self.installments is not None


@dataclass(frozen=True)
class CardAccount:
    """Credit card with its billing cycle and ordered charges."""

    id: str
    name: str
    cut_off_day: int
    grace_period_days: int
    credit_limit: Decimal
    charges: tuple[Charge, ...] = ()


@dataclass(frozen=True)
class YieldConfig:
    """Yield settings of a debit account."""

    enabled: bool = False
    annual_rate_percent: Decimal = Decimal("0")
    capped: bool = False
    cap_amount: Optional[Decimal] = None
    accrual_frequency: AccrualFrequency = AccrualFrequency.MONTHLY
    last_accrual_date: Optional[date] = None


@dataclass(frozen=True)
class DebitMovement:
    """Income or expense on a debit account.

    is_yield marks a settled, system-generated yield income entry.
    """

    id: str
    kind: MovementKind
    amount: Decimal
    description: str
    recurrence: Recurrence
    is_yield: bool = False


@dataclass(frozen=True)
class DebitAccount:
    """Debit account with optional yield and its movements."""

    id: str
    name: str
    yield_config: YieldConfig = field(default_factory=YieldConfig)
    movements: tuple[DebitMovement, ...] = ()


@dataclass(frozen=True)
class Period:
    """A 14-day accounting period ("catorcena"), both ends inclusive.

    year is the grid the period belongs to and index its position (0-25) in it.
    """

    year: int
    index: int
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class PaidMark:
    """Covered flag for one item occurrence in one period of one year grid."""

    year: int
    period_index: int
    item_id: str


@dataclass(frozen=True)
class YieldEntry:
    """Yield accrued on a date, settled (persisted) or projected."""

    date: date
    amount: Decimal
    settled: bool = False


@dataclass(frozen=True)
class YieldPoint:
    """One date of a debit account time series."""

    date: date
    income: Decimal
    expense: Decimal
    settled_yield: Decimal
    projected_yield: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class InstallmentDue:
    """One MSI installment with its resolved payment date."""

    index: int
    purchase_date: date
    due_date: date
    amount: Decimal


@dataclass(frozen=True)
class InstallmentStatus:
    """Progress of an MSI plan relative to a reference day."""

    monthly_amount: Decimal
    payments_made: int
    payments_remaining: int
    next_payment: date
    end_date: date


@dataclass(frozen=True)
class ChargeOccurrence:
    """A card charge occurrence resolved to its due date."""

    card_id: str
    charge_id: str
    ordinal: int
    purchase_date: date
    due_date: date
    amount: Decimal

    @property
    def item_id(self) -> str:
        """Paid-mark key: card, charge and installment (or occurrence) index."""
        return f"{self.card_id}-{self.charge_id}-{self.ordinal}"


@dataclass(frozen=True)
class PeriodItem:
    """Itemized line of a period: a movement or a card charge occurrence."""

    item_id: str
    source: str
    kind: MovementKind
    description: str
    amount: Decimal
    date: date
    recurring: bool
    paid: bool = False
    card_name: Optional[str] = None


@dataclass(frozen=True)
class CardPeriodTotal:
    """Sum of a card's dues inside a period."""

    card_id: str
    name: str
    total: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregates and itemized lines of one period."""

    period: Period
    income_total: Decimal
    expense_total: Decimal
    card_charge_total: Decimal
    balance: Decimal
    running_balance: Decimal
    items: tuple[PeriodItem, ...] = ()
    card_totals: tuple[CardPeriodTotal, ...] = ()


@dataclass(frozen=True)
class PeriodReport:
    """Summaries of consecutive periods plus the data-quality warnings."""

    year: int
    summaries: tuple[PeriodSummary, ...]
    warnings: tuple["DataWarning", ...] = ()


@dataclass(frozen=True)
class DataWarning:
    """A record that was excluded from computation, with the reason."""

    source: str
    record_id: str
    message: str


@dataclass(frozen=True)
class Snapshot:
    """Immutable input collections for one computation."""

    movements: tuple[Movement, ...] = ()
    cards: tuple[CardAccount, ...] = ()
    debit_accounts: tuple[DebitAccount, ...] = ()
    paid_marks: frozenset[PaidMark] = frozenset()
    warnings: tuple[DataWarning, ...] = ()


@dataclass(frozen=True)
class ExpenseRow:
    """Expense line of a report table.

    origin is "General", "TC: <card>" or "TD: <debit account>".
    """

    origin: str
    description: str
    amount: Decimal
    date: date
    frequency: Optional[str] = None
    is_msi: bool = False


@dataclass(frozen=True)
class MsiPurchase:
    """An MSI purchase with the status of its plan."""

    card_name: str
    description: str
    amount: Decimal
    months: int
    purchase_date: date
    status: InstallmentStatus


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Expense totals split into normal, recurring and MSI."""

    normal: Decimal
    recurring: Decimal
    msi: Decimal
