"""Tests for parsing store records into domain entities."""

from datetime import date
from decimal import Decimal

import pytest

from catorcena.domain.entities import (
    AccrualFrequency,
    Biweekly,
    Daily,
    Monthly,
    MovementKind,
    OneOff,
    PaidMark,
    Weekly,
)
from catorcena.domain.errors import (
    InvalidInstallmentPlan,
    InvalidRecurrenceConfig,
    ValidationError,
)
from catorcena.domain.records import (
    build_snapshot,
    charge_to_record,
    movement_to_record,
    parse_card,
    parse_charge,
    parse_debit_account,
    parse_kind,
    parse_movement,
    parse_paid_mark,
    parse_recurrence,
    parse_yield_config,
)


class TestParseRecurrence:
    def test_one_off(self):
        assert parse_recurrence({"recurrence": "one-off", "date": "2025-02-07"}) == OneOff(date(2025, 2, 7))

    def test_frequency_without_recurrence_is_recurring(self):
        rec = parse_recurrence({"frequency": "catorcenal", "start_date": "2025-01-10"})
        assert rec == Biweekly(start_date=date(2025, 1, 10))

    @pytest.mark.parametrize(
        "name,expected",
        [("diario", Daily), ("daily", Daily), ("mensual", Monthly), ("Semanal", Weekly)],
    )
    def test_spanish_and_english_names(self, name, expected):
        record = {
            "recurrence": "recurrente",
            "frequency": name,
            "start_date": "2025-01-01",
            "day_of_week": "lunes",
            "day_of_month": 15,
        }
        assert isinstance(parse_recurrence(record), expected)

    def test_weekday_name_with_accent(self):
        record = {"recurrence": "recurring", "frequency": "weekly", "start_date": "2025-01-01", "day_of_week": "Miércoles"}
        assert parse_recurrence(record).day_of_week == 3

    def test_weekly_without_weekday(self):
        with pytest.raises(InvalidRecurrenceConfig):
            parse_recurrence({"recurrence": "recurring", "frequency": "weekly", "start_date": "2025-01-01"})

    def test_unknown_weekday(self):
        with pytest.raises(InvalidRecurrenceConfig):
            parse_recurrence(
                {"recurrence": "recurring", "frequency": "weekly", "start_date": "2025-01-01", "day_of_week": "funday"}
            )

    def test_monthly_without_day(self):
        with pytest.raises(InvalidRecurrenceConfig):
            parse_recurrence({"recurrence": "recurring", "frequency": "monthly", "start_date": "2025-01-01"})

    def test_monthly_day_out_of_range(self):
        with pytest.raises(InvalidRecurrenceConfig):
            parse_recurrence(
                {"recurrence": "recurring", "frequency": "monthly", "start_date": "2025-01-01", "day_of_month": 32}
            )

    def test_unknown_frequency(self):
        with pytest.raises(InvalidRecurrenceConfig):
            parse_recurrence({"recurrence": "recurring", "frequency": "yearly", "start_date": "2025-01-01"})

    def test_bad_date(self):
        with pytest.raises(ValidationError):
            parse_recurrence({"recurrence": "one-off", "date": "not a date"})


class TestParseMovement:
    def test_valid_record(self):
        movement = parse_movement(
            {"id": 3, "kind": "Ingreso", "amount": "1,500.50", "description": "Nomina", "date": "2025-01-15"}
        )
        assert movement.id == "3"
        assert movement.kind == MovementKind.INCOME
        assert movement.amount == Decimal("1500.50")
        assert movement.recurrence == OneOff(date(2025, 1, 15))

    def test_negative_amount(self):
        with pytest.raises(ValidationError):
            parse_movement({"id": 1, "kind": "gasto", "amount": "-5", "date": "2025-01-15"})

    def test_missing_id(self):
        with pytest.raises(ValidationError):
            parse_movement({"kind": "gasto", "amount": "5", "date": "2025-01-15"})

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            parse_kind("transfer")


class TestParseCharge:
    def test_msi_charge_is_one_off(self):
        charge = parse_charge(
            {"id": 2, "description": "TV", "amount": 9000, "purchase_date": "2025-03-01", "installment_months": 6,
             "frequency": "monthly"}
        )
        assert charge.is_installment
        assert charge.installments.months == 6
        assert charge.recurrence == OneOff(date(2025, 3, 1))

    def test_recurring_charge_starts_on_purchase(self):
        charge = parse_charge(
            {"description": "Streaming", "amount": "199", "date": "2025-01-05", "frequency": "monthly"}, position=4
        )
        assert charge.id == "4"
        assert charge.recurrence == Monthly(start_date=date(2025, 1, 5), day_of_month=None)

    @pytest.mark.parametrize("months", [0, -2, "x"])
    def test_invalid_months(self, months):
        with pytest.raises(InvalidInstallmentPlan):
            parse_charge({"amount": 100, "purchase_date": "2025-01-01", "installment_months": months})

    def test_flagged_installment_without_months(self):
        with pytest.raises(InvalidInstallmentPlan):
            parse_charge({"amount": 100, "purchase_date": "2025-01-01", "is_installment": True})


class TestParseAccounts:
    def test_card_drops_invalid_charge_into_warnings(self):
        warnings = []
        card = parse_card(
            {
                "id": 1,
                "name": "Oro",
                "cut_off_day": 10,
                "charges": [
                    {"id": "a", "amount": 100, "purchase_date": "2025-01-01"},
                    {"id": "b", "amount": 100, "purchase_date": "bogus"},
                ],
            },
            warnings,
        )
        assert [c.id for c in card.charges] == ["a"]
        assert len(warnings) == 1
        assert warnings[0].source == "charge"
        assert warnings[0].record_id == "1-1"

    def test_card_without_warnings_list_raises(self):
        with pytest.raises(ValidationError):
            parse_card({"id": 1, "cut_off_day": 10, "charges": [{"amount": 1, "purchase_date": "bogus"}]})

    @pytest.mark.parametrize("day", [0, 32, None, "x"])
    def test_card_cut_off_day(self, day):
        with pytest.raises(ValidationError):
            parse_card({"id": 1, "cut_off_day": day})

    def test_yield_config(self):
        config = parse_yield_config(
            {"enabled": True, "annual_rate_percent": "10.5", "capped": True, "cap_amount": 25000,
             "accrual_frequency": "diario", "last_accrual_date": "2025-01-01"}
        )
        assert config.enabled
        assert config.annual_rate_percent == Decimal("10.5")
        assert config.cap_amount == Decimal("25000")
        assert config.accrual_frequency == AccrualFrequency.DAILY
        assert config.last_accrual_date == date(2025, 1, 1)

    def test_missing_yield_is_disabled(self):
        assert not parse_yield_config(None).enabled

    def test_debit_account(self):
        account = parse_debit_account(
            {
                "id": 5,
                "name": "Ahorro",
                "movements": [
                    {"id": 1, "kind": "income", "amount": 100, "date": "2025-01-01", "is_yield": True},
                ],
            }
        )
        assert account.id == "5"
        assert account.movements[0].is_yield


class TestPaidMarks:
    def test_mapping(self):
        assert parse_paid_mark({"year": "2025", "period_index": "3", "item_id": 12}) == PaidMark(2025, 3, "12")

    def test_triple(self):
        assert parse_paid_mark((2026, 0, "1-7-2")) == PaidMark(2026, 0, "1-7-2")

    def test_empty_item(self):
        with pytest.raises(ValidationError):
            parse_paid_mark((2025, 0, ""))

    @pytest.mark.parametrize("record", [{"period_index": 0, "item_id": "1"}, (0, "1"), ("x", 0, "1")])
    def test_missing_or_invalid_year(self, record):
        with pytest.raises(ValidationError):
            parse_paid_mark(record)


class TestBuildSnapshot:
    def test_bad_records_become_warnings(self):
        snapshot = build_snapshot(
            movements=[
                {"id": 1, "kind": "income", "amount": 100, "date": "2025-01-15"},
                {"id": 2, "kind": "expense", "amount": 50, "frequency": "weekly", "start_date": "2025-01-01"},
            ],
            cards=[{"id": 9, "cut_off_day": 40}],
            paid_marks=[(2025, 0, "1"), (2025, "x", "2")],
        )
        assert [m.id for m in snapshot.movements] == ["1"]
        assert snapshot.cards == ()
        assert snapshot.paid_marks == frozenset({PaidMark(2025, 0, "1")})
        assert {(w.source, w.record_id) for w in snapshot.warnings} == {
            ("movement", "2"),
            ("card", "9"),
            ("paid_mark", "1"),
        }

    def test_malformed_or_partial_dates_become_warnings(self):
        snapshot = build_snapshot(
            movements=[
                {"id": "m1", "kind": "expense", "amount": 10, "date": "2025-13-01"},
                {"id": "m2", "kind": "expense", "amount": 10, "date": "15"},
                {"id": "m3", "kind": "expense", "amount": 10, "date": "hoy"},
                {"id": "m4", "kind": "expense", "amount": 10, "date": "2025-03-15"},
            ],
        )
        assert [m.id for m in snapshot.movements] == ["m4"]
        assert [w.record_id for w in snapshot.warnings] == ["m1", "m2", "m3"]
        assert all("date" in w.message for w in snapshot.warnings)


def test_serialized_records_parse_back():
    movement = parse_movement(
        {"id": 8, "kind": "expense", "amount": "300", "frequency": "weekly", "start_date": "2025-01-01",
         "day_of_week": "viernes"}
    )
    assert parse_movement(movement_to_record(movement)) == movement

    charge = parse_charge({"id": 3, "amount": "450", "purchase_date": "2025-02-10", "frequency": "biweekly"})
    assert parse_charge(charge_to_record(charge)) == charge
