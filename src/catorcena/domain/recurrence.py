"""Recurrence resolution for movements.

Two ways of placing a movement in a period live here. `belongs_to_period`
and `period_amount` reproduce the period-level shortcut (a daily movement is
worth 14 instances, a weekly one 2). `occurrences_between` enumerates the
actual calendar occurrences, the same model card charges use, and is what
period summaries use unless AmountModel.SCALED is requested.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Protocol

from catorcena.domain.entities import (
    AmountModel,
    Biweekly,
    Daily,
    Monthly,
    OneOff,
    Recurrence,
    Weekly,
)
from catorcena.domain.errors import InvalidRecurrenceConfig, unknown_frequency
from catorcena.utils.dates import (
    clamp_day,
    first_occurrence_on_or_after,
    in_inclusive_range,
    iter_days,
    shift_month,
)

PERIOD_DAYS = 14


class HasRecurrence(Protocol):
    amount: Decimal
    recurrence: Recurrence


def belongs_to_period(movement: HasRecurrence, start: date, end: date) -> bool:
    """Decide whether a movement counts in the period [start, end].

    A monthly recurrence is tested against a single candidate, the
    day_of_month in the month of the period start, so it contributes at most
    once per period. A biweekly recurrence belongs only when the period start
    is aligned with its 14-day cadence.
    """
    rec = movement.recurrence
    if isinstance(rec, OneOff):
        return in_inclusive_range(rec.date, start, end)

    if rec.start_date > end:
        return False

    if isinstance(rec, Monthly):
        day = rec.day_of_month or rec.start_date.day
        candidate = clamp_day(start.year, start.month, day)
        return in_inclusive_range(candidate, start, end) and candidate >= rec.start_date
    if isinstance(rec, Weekly):
        first = first_occurrence_on_or_after(max(start, rec.start_date), rec.day_of_week)
        return first <= end
    if isinstance(rec, Biweekly):
        diff = (start - rec.start_date).days
        return diff >= 0 and diff % PERIOD_DAYS == 0
    if isinstance(rec, Daily):
        return rec.start_date <= end

    raise InvalidRecurrenceConfig(unknown_frequency(type(rec).__name__))


def period_amount(movement: HasRecurrence) -> Decimal:
    """Return the amount a movement contributes to one period (scaled model)."""
    rec = movement.recurrence
    if isinstance(rec, Daily):
        return movement.amount * PERIOD_DAYS
    if isinstance(rec, Weekly):
        return movement.amount * 2
    return movement.amount


def occurrences_between(recurrence: Recurrence, start: date, end: date) -> list[date]:
    """Enumerate occurrences of a recurrence inside [start, end].

    Occurrences before the recurrence start date are never produced.
    """
    if isinstance(recurrence, OneOff):
        return [recurrence.date] if in_inclusive_range(recurrence.date, start, end) else []

    low = max(start, recurrence.start_date)
    if low > end:
        return []

    if isinstance(recurrence, Daily):
        return list(iter_days(low, end))

    if isinstance(recurrence, Weekly):
        return _stepped(first_occurrence_on_or_after(low, recurrence.day_of_week), end, 7)

    if isinstance(recurrence, Biweekly):
        offset = (low - recurrence.start_date).days
        steps = -(-offset // PERIOD_DAYS)
        first = recurrence.start_date + timedelta(days=steps * PERIOD_DAYS)
        return _stepped(first, end, PERIOD_DAYS)

    if isinstance(recurrence, Monthly):
        day = recurrence.day_of_month or recurrence.start_date.day
        result = []
        year, month = low.year, low.month
        while (year, month) <= (end.year, end.month):
            candidate = clamp_day(year, month, day)
            if low <= candidate <= end:
                result.append(candidate)
            year, month = shift_month(year, month, 1)
        return result

    raise InvalidRecurrenceConfig(unknown_frequency(type(recurrence).__name__))


def _stepped(first: date, end: date, step: int) -> list[date]:
    result = []
    current = first
    while current <= end:
        result.append(current)
        current += timedelta(days=step)
    return result


def occurrences_in_period(movement: HasRecurrence, start: date, end: date) -> list[date]:
    """Enumerate the calendar occurrences of a movement inside a period."""
    return occurrences_between(movement.recurrence, start, end)


def movement_period_total(
    movement: HasRecurrence,
    start: date,
    end: date,
    model: AmountModel = AmountModel.ENUMERATED,
) -> Decimal:
    """Return what a movement contributes to the period [start, end]."""
    if model == AmountModel.SCALED:
        if belongs_to_period(movement, start, end):
            return period_amount(movement)
        return Decimal("0")
    return movement.amount * len(occurrences_in_period(movement, start, end))
