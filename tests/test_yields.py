"""Tests for debit yield accrual, settlement and projection."""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

from catorcena.domain.entities import (
    AccrualFrequency,
    DebitAccount,
    DebitMovement,
    Monthly,
    MovementKind,
    OneOff,
    YieldConfig,
)
from catorcena.domain.yields import (
    YIELD_DESCRIPTION,
    account_balance,
    accrue_yield,
    accrual_dates,
    project_compound,
    projected_yield_total,
    settle_yield,
    yield_capital,
    yield_series,
)


def _movement(id, kind, amount, day, is_yield=False):
    return DebitMovement(
        id=id,
        kind=kind,
        amount=Decimal(amount),
        description="Rendimiento" if is_yield else "Movimiento",
        recurrence=OneOff(day),
        is_yield=is_yield,
    )


def _account(*movements, **config):
    settings = {
        "enabled": True,
        "annual_rate_percent": Decimal("12"),
        "accrual_frequency": AccrualFrequency.MONTHLY,
        "last_accrual_date": date(2025, 1, 1),
    }
    settings.update(config)
    return DebitAccount(id="1", name="Ahorro", yield_config=YieldConfig(**settings), movements=movements)


DEPOSIT = _movement("d1", MovementKind.INCOME, "10000", date(2024, 12, 31))


class TestCapital:
    def test_one_off_income_minus_expense(self):
        account = _account(
            DEPOSIT,
            _movement("e1", MovementKind.EXPENSE, "2500", date(2025, 1, 5)),
        )
        assert yield_capital(account, date(2025, 2, 1)) == Decimal("7500")

    def test_future_movements_are_ignored(self):
        account = _account(DEPOSIT, _movement("d2", MovementKind.INCOME, "5000", date(2025, 6, 1)))
        assert yield_capital(account, date(2025, 2, 1)) == Decimal("10000")

    def test_recurring_movements_are_not_capital(self):
        salary = DebitMovement(
            id="r1",
            kind=MovementKind.INCOME,
            amount=Decimal("1000"),
            description="Nomina",
            recurrence=Monthly(start_date=date(2025, 1, 1), day_of_month=1),
        )
        assert yield_capital(_account(DEPOSIT, salary), date(2025, 3, 15)) == Decimal("10000")

    def test_cap_limits_capital(self):
        account = _account(DEPOSIT, capped=True, cap_amount=Decimal("5000"))
        assert yield_capital(account, date(2025, 2, 1)) == Decimal("5000")

    def test_capital_is_never_negative(self):
        account = _account(_movement("e1", MovementKind.EXPENSE, "300", date(2024, 12, 1)))
        assert yield_capital(account, date(2025, 2, 1)) == Decimal("0")
        assert accrue_yield(account, date(2025, 4, 1))[0].amount == Decimal("0")


class TestAccrual:
    def test_monthly_steps_before_as_of(self):
        assert accrual_dates(_account().yield_config, date(2025, 4, 1)) == [
            date(2025, 1, 1),
            date(2025, 2, 1),
            date(2025, 3, 1),
        ]

    def test_monthly_entries(self):
        entries = accrue_yield(_account(DEPOSIT), date(2025, 4, 1))
        assert [e.amount for e in entries] == [Decimal("100")] * 3
        assert not any(e.settled for e in entries)

    def test_daily_entries(self):
        account = _account(
            _movement("d1", MovementKind.INCOME, "1000", date(2024, 12, 31)),
            annual_rate_percent=Decimal("36.5"),
            accrual_frequency=AccrualFrequency.DAILY,
        )
        entries = accrue_yield(account, date(2025, 1, 11))
        assert len(entries) == 10
        assert entries[0].date == date(2025, 1, 1)
        assert entries[-1].date == date(2025, 1, 10)
        assert all(e.amount == Decimal("1") for e in entries)

    def test_cap_bounds_every_entry(self):
        account = _account(DEPOSIT, capped=True, cap_amount=Decimal("5000"))
        for entry in accrue_yield(account, date(2025, 6, 1)):
            assert entry.amount <= Decimal("5000") * Decimal("0.01")

    def test_disabled_yield_accrues_nothing(self):
        assert accrue_yield(_account(DEPOSIT, enabled=False), date(2025, 4, 1)) == []

    def test_settled_dates_are_not_projected_again(self):
        account = _account(DEPOSIT, _movement("y1", MovementKind.INCOME, "100", date(2025, 2, 1), is_yield=True))
        dates = [e.date for e in accrue_yield(account, date(2025, 4, 1))]
        assert dates == [date(2025, 1, 1), date(2025, 3, 1)]


class TestSettlement:
    def test_settle_creates_yield_income(self):
        movements, next_date = settle_yield(_account(DEPOSIT), date(2025, 4, 1))
        assert len(movements) == 3
        assert all(m.is_yield for m in movements)
        assert all(m.kind == MovementKind.INCOME for m in movements)
        assert all(m.description == YIELD_DESCRIPTION for m in movements)
        assert [m.recurrence.date for m in movements] == [
            date(2025, 1, 1),
            date(2025, 2, 1),
            date(2025, 3, 1),
        ]
        assert next_date == date(2025, 4, 1)

    def test_settled_amounts_are_rounded_to_cents(self):
        account = _account(_movement("d1", MovementKind.INCOME, "1234.56", date(2024, 12, 31)))
        movements, _ = settle_yield(account, date(2025, 2, 1))
        assert movements[0].amount == Decimal("12.35")

    def test_no_double_count_after_settling(self):
        account = _account(DEPOSIT)
        as_of = date(2025, 4, 1)
        assert account_balance(account, as_of) == Decimal("10000")
        assert projected_yield_total(account, as_of) == Decimal("300")

        movements, next_date = settle_yield(account, as_of)
        settled = replace(
            account,
            movements=account.movements + tuple(movements),
            yield_config=replace(account.yield_config, last_accrual_date=next_date),
        )
        assert account_balance(settled, as_of) == Decimal("10300")
        assert projected_yield_total(settled, as_of) == Decimal("0")
        assert accrue_yield(settled, as_of) == []


class TestBalanceAndSeries:
    def test_balance_counts_recurring_occurrences_to_date(self):
        salary = DebitMovement(
            id="r1",
            kind=MovementKind.INCOME,
            amount=Decimal("1000"),
            description="Nomina",
            recurrence=Monthly(start_date=date(2025, 1, 1), day_of_month=1),
        )
        account = _account(DEPOSIT, salary, enabled=False)
        assert account_balance(account, date(2025, 3, 15)) == Decimal("13000")

    def test_series_keeps_projection_out_of_running_balance(self):
        account = _account(DEPOSIT, _movement("e1", MovementKind.EXPENSE, "500", date(2025, 1, 15)))
        points = yield_series(account, date(2025, 2, 1))
        assert [p.date for p in points] == [date(2024, 12, 31), date(2025, 1, 1), date(2025, 1, 15)]
        assert points[0].income == Decimal("10000")
        assert points[1].projected_yield == Decimal("95")
        assert points[1].running_balance == Decimal("10000")
        assert points[2].expense == Decimal("500")
        assert points[2].running_balance == Decimal("9500")

    def test_series_window(self):
        account = _account(DEPOSIT, _movement("e1", MovementKind.EXPENSE, "500", date(2025, 1, 15)))
        points = yield_series(account, date(2025, 2, 1), start=date(2025, 1, 10), end=date(2025, 1, 31))
        assert [p.date for p in points] == [date(2025, 1, 15)]
        # the deposit before the window still counts
        assert points[0].running_balance == Decimal("9500")


def test_project_compound_daily():
    today = date(2025, 1, 1)
    projected = project_compound(Decimal("1000"), Decimal("36.5"), today + timedelta(days=2), today)
    assert projected == Decimal("1002.001")


def test_project_compound_same_day_is_balance():
    today = date(2025, 1, 1)
    assert project_compound(Decimal("1000"), Decimal("10"), today, today) == Decimal("1000")
