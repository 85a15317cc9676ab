"""MSI (meses sin intereses) installment expansion."""

from datetime import date
from decimal import Decimal, ROUND_DOWN

from catorcena.domain.billing import due_date
from catorcena.domain.entities import (
    CardAccount,
    Charge,
    InstallmentDue,
    InstallmentStatus,
)
from catorcena.domain.errors import (
    InvalidInstallmentPlan,
    invalid_installment_months,
)
from catorcena.utils.amount_parser import CENT
from catorcena.utils.dates import add_months_clamped, in_inclusive_range


def installment_months(charge: Charge) -> int:
    """Return the validated month count of an MSI charge.

    Raises:
        InvalidInstallmentPlan: If the charge has no plan or months <= 0
    """
    if charge.installments is None:
        raise InvalidInstallmentPlan(f"Charge '{charge.description}' has no installment plan")
    months = charge.installments.months
    if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
        raise InvalidInstallmentPlan(invalid_installment_months(months))
    return months


def split_amount(total: Decimal, months: int) -> list[Decimal]:
    """Split total into equal cent amounts; the last one absorbs the remainder.

    The share is truncated to cents so the last part is never smaller than
    the others, and the parts always sum to total exactly.
    """
    if months <= 0:
        raise InvalidInstallmentPlan(invalid_installment_months(months))
    share = (total / months).quantize(CENT, rounding=ROUND_DOWN)
    parts = [share] * (months - 1)
    parts.append(total - share * (months - 1))
    return parts


def monthly_amount(charge: Charge) -> Decimal:
    """Return the regular monthly installment ("cuota") of an MSI charge."""
    return split_amount(charge.amount, installment_months(charge))[0]


def installment_dues(charge: Charge, card: CardAccount) -> list[InstallmentDue]:
    """Expand an MSI charge into one due per month.

    Installment i is purchased i months after the purchase date (day clamped)
    and is due according to the card's billing cycle.

    Raises:
        InvalidInstallmentPlan: If the month count is not positive
    """
    months = installment_months(charge)
    dues = []
    for i, amount in enumerate(split_amount(charge.amount, months)):
        purchase = add_months_clamped(charge.purchase_date, i)
        dues.append(
            InstallmentDue(
                index=i,
                purchase_date=purchase,
                due_date=due_date(purchase, card),
                amount=amount,
            )
        )
    return dues


def installment_dues_in_period(
    charge: Charge, card: CardAccount, start: date, end: date
) -> list[InstallmentDue]:
    """Return the installments of a charge due inside [start, end]."""
    return [
        due
        for due in installment_dues(charge, card)
        if in_inclusive_range(due.due_date, start, end)
    ]


def installment_status(charge: Charge, card: CardAccount, today: date) -> InstallmentStatus:
    """Summarize an MSI plan relative to today.

    Installments whose purchase occurrence is strictly before today count as
    made. The next payment is the earliest due date on or after today, or the
    last due date once every installment is past.
    """
    dues = installment_dues(charge, card)
    made = sum(1 for due in dues if due.purchase_date < today)
    upcoming = [due.due_date for due in dues if due.due_date >= today]
    return InstallmentStatus(
        monthly_amount=dues[0].amount,
        payments_made=made,
        payments_remaining=max(len(dues) - made, 0),
        next_payment=min(upcoming) if upcoming else dues[-1].due_date,
        end_date=dues[-1].due_date,
    )
