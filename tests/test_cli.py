"""Tests for the command line interface."""

import json

import pytest

from catorcena.cli.main import cli


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database with a fixed today."""

    def invoke(*args):
        return cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "--today", "2025-03-05", *args]
        )

    return invoke


@pytest.fixture
def card_with_laptop(run):
    """Card Oro (ID 1) with a 1500 laptop bought in 3 MSI on 2025-01-15 (charge 1)."""
    result = run("card", "create", "Oro", "--cut-off-day", "10", "--grace-days", "20", "--limit", "30000")
    assert result.exit_code == 0, result.output
    result = run("card", "charge-add", "Oro", "1500", "Laptop", "--date", "2025-01-15", "--msi", "3")
    assert result.exit_code == 0, result.output
    return "1"


def test_help_does_not_need_a_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "periods" in result.output


def test_invalid_today(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "--today", "someday", "periods"])
    assert result.exit_code == 1
    assert "Invalid --today" in result.output


class TestMovementCommands:
    def test_add_and_list(self, run):
        result = run("movement", "add", "expense", "250", "Luz", "--date", "2025-03-03")
        assert result.exit_code == 0
        assert "Created movement 1: Luz" in result.output

        result = run("movement", "list")
        assert result.exit_code == 0
        assert "Luz" in result.output
        assert "$250.00" in result.output
        assert "2025-03-03" in result.output

    def test_one_off_defaults_to_today(self, run):
        run("movement", "add", "gasto", "80", "Taxi")
        assert "2025-03-05" in run("movement", "list").output

    def test_recurring(self, run):
        result = run(
            "movement", "add", "income", "15000", "Nomina",
            "--frequency", "catorcenal", "--start-date", "2025-01-10",
        )
        assert result.exit_code == 0
        assert "biweekly" in run("movement", "list").output

    def test_weekly_needs_day_of_week(self, run):
        result = run("movement", "add", "expense", "120", "Gym", "--frequency", "weekly")
        assert result.exit_code == 1
        assert "day_of_week" in result.output

    def test_edit(self, run):
        run("movement", "add", "expense", "250", "Luz", "--date", "2025-03-03")
        result = run("movement", "edit", "1", "--amount", "300")
        assert result.exit_code == 0
        assert "Updated movement 1" in result.output
        assert "$300.00" in result.output
        assert "Luz" in result.output

    def test_delete_missing(self, run):
        result = run("movement", "delete", "99")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestCardCommands:
    def test_create_and_list(self, run, card_with_laptop):
        result = run("card", "list")
        assert result.exit_code == 0
        assert "Oro" in result.output
        assert "Spent: $1,500.00" in result.output
        assert "Available: $28,500.00" in result.output

    def test_duplicate_card(self, run, card_with_laptop):
        result = run("card", "create", "Oro", "--cut-off-day", "5")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_unknown_card(self, run):
        result = run("card", "charge-add", "Plata", "100", "Cena")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_zero_installments(self, run, card_with_laptop):
        result = run("card", "charge-add", "Oro", "100", "Cena", "--msi", "0")
        assert result.exit_code == 1
        assert "positive number of months" in result.output

    def test_show(self, run, card_with_laptop):
        result = run("card", "show", "Oro")
        assert result.exit_code == 0
        assert "MSI 3" in result.output
        assert "Laptop" in result.output

    def test_installments(self, run, card_with_laptop):
        result = run("card", "installments")
        assert result.exit_code == 0
        assert "$500.00/month" in result.output
        assert "paid 2/3" in result.output
        assert "next 2025-03-30" in result.output
        assert "ends 2025-04-30" in result.output

    def test_delete_charge(self, run, card_with_laptop):
        result = run("card", "charge-delete", "Oro", "1")
        assert result.exit_code == 0
        assert "No charges." in run("card", "show", "Oro").output


class TestPeriodsAndPaid:
    def test_totals(self, run, card_with_laptop):
        result = run("periods", "--year", "2025")
        assert result.exit_code == 0
        assert "Catorcenas 2025" in result.output
        assert "2025-01-10" in result.output

    def test_detail_and_toggle(self, run, card_with_laptop):
        result = run("periods", "--year", "2025", "--period", "4")
        assert result.exit_code == 0
        assert "Catorcena 4: 2025-02-21 to 2025-03-06" in result.output
        assert "Laptop (MSI 1/3)" in result.output
        assert "[ ] 2025-03-02" in result.output
        assert "ID: 1-1-0" in result.output

        result = run("paid", "toggle", "4", "1-1-0")
        assert result.exit_code == 0
        assert "Item 1-1-0 in catorcena 4 of 2025 marked as paid" in result.output
        assert "[x] 2025-03-02" in run("periods", "--year", "2025", "--period", "4").output
        assert "1-1-0" in run("paid", "list", "--period", "4").output

        result = run("paid", "toggle", "4", "1-1-0")
        assert "marked as unpaid" in result.output
        assert "No paid items." in run("paid", "list").output

    def test_toggle_in_another_year(self, run):
        run("movement", "add", "expense", "3000", "Renta", "--frequency", "monthly",
            "--start-date", "2025-01-01", "--day-of-month", "15")
        result = run("paid", "toggle", "1", "1", "--year", "2026")
        assert result.exit_code == 0
        assert "catorcena 1 of 2026 marked as paid" in result.output

        assert "[x] 2026-01-15" in run("periods", "--year", "2026", "--period", "1").output
        assert "[ ] 2025-01-15" in run("periods", "--year", "2025", "--period", "1").output
        assert "No paid items." in run("paid", "list", "--year", "2025").output
        assert "2026 | Catorcena  1 | 1" in run("paid", "list", "--year", "2026").output

    def test_current(self, run, card_with_laptop):
        result = run("periods", "--current")
        assert result.exit_code == 0
        assert "Catorcena 4: 2025-02-21 to 2025-03-06" in result.output

    def test_period_and_current_conflict(self, run):
        result = run("periods", "--period", "2", "--current")
        assert result.exit_code == 1

    def test_period_out_of_range(self, run):
        assert run("paid", "toggle", "27", "1").exit_code != 0

    def test_scaled_model(self, run):
        run("movement", "add", "expense", "10", "Cafe", "--frequency", "daily", "--start-date", "2025-01-01")
        result = run("periods", "--year", "2025", "--period", "1", "--model", "scaled")
        assert result.exit_code == 0
        assert "$140.00" in result.output


class TestDebitCommands:
    @pytest.fixture
    def savings(self, run):
        result = run(
            "debit", "create", "Ahorro", "--yield-rate", "12",
            "--accrual", "monthly", "--accrual-start", "2025-01-01",
        )
        assert result.exit_code == 0, result.output
        assert "Created debit account 'Ahorro' (ID: 1)" in result.output
        result = run("debit", "movement-add", "Ahorro", "income", "10000", "Deposito", "--date", "2024-12-31")
        assert result.exit_code == 0, result.output
        return "Ahorro"

    def test_pending_yield(self, run, savings):
        result = run("debit", "yield", savings)
        assert result.exit_code == 0
        assert "2025-01-01" in result.output
        assert "2025-03-01" in result.output
        assert "$300.00" in result.output

    def test_settle(self, run, savings):
        result = run("debit", "settle", savings)
        assert result.exit_code == 0
        assert "Settled 3 yield entries" in result.output

        assert "No new yield to settle." in run("debit", "settle", savings).output
        listing = run("debit", "list").output
        assert "Balance: $10,300.00" in listing
        assert "Pending yield: $0.00" in listing
        assert "[yield]" in run("debit", "show", savings).output

    def test_project(self, run, savings):
        result = run("debit", "project", savings, "2025-12-31")
        assert result.exit_code == 0
        assert "Balance today (2025-03-05): $10,000.00" in result.output

        result = run("debit", "project", savings, "2025-01-01")
        assert result.exit_code == 1

    def test_project_with_rate(self, run, savings):
        result = run("debit", "project", savings, "2025-03-07", "--rate", "36.5")
        assert result.exit_code == 0
        assert "Projected on 2025-03-07: $10,020.01" in result.output

        result = run("debit", "project", savings, "2025-03-07", "--rate", "abc")
        assert result.exit_code == 1
        assert "Invalid rate" in result.output

    def test_series(self, run, savings):
        result = run("debit", "series", savings, "--start-date", "2024-12-01")
        assert result.exit_code == 0
        assert "2024-12-31" in result.output
        assert "$10,000.00" in result.output

    def test_invalid_cap_is_rejected(self, run):
        result = run("debit", "create", "Ahorro", "--yield-rate", "10", "--cap", "abc")
        assert result.exit_code == 1

    def test_movement_edit_and_delete(self, run, savings):
        result = run("debit", "movement-edit", savings, "1", "--amount", "5000")
        assert result.exit_code == 0
        assert "$5,000.00" in run("debit", "show", savings).output
        assert run("debit", "movement-delete", savings, "1").exit_code == 0
        assert "No movements." in run("debit", "show", savings).output

    def test_delete_account(self, run, savings):
        assert run("debit", "delete", savings).exit_code == 0
        assert "No debit accounts found." in run("debit", "list").output


class TestReportCommands:
    def test_expenses_with_breakdown(self, run, card_with_laptop):
        run("movement", "add", "expense", "250", "Luz", "--date", "2025-03-03")
        result = run("report", "expenses", "--breakdown")
        assert result.exit_code == 0
        assert "TC: Oro" in result.output
        assert "General" in result.output
        assert "Breakdown:" in result.output
        assert "$500.00" in result.output

    def test_recurring(self, run, card_with_laptop):
        result = run("report", "recurring")
        assert result.exit_code == 0
        assert "MSI (3)" in result.output

    def test_msi(self, run, card_with_laptop):
        result = run("report", "msi")
        assert result.exit_code == 0
        assert "Monthly flow:" in result.output
        assert "2025-01" in result.output
        assert "2025-03" in result.output

    def test_no_expenses(self, run):
        assert "No expenses found." in run("report", "expenses").output


def test_export(run, card_with_laptop, tmp_path):
    out = tmp_path / "csv"
    result = run("export", str(out), "--year", "2025")
    assert result.exit_code == 0
    for name in ("periods.csv", "period_totals.csv", "expenses.csv", "recurring.csv", "msi.csv"):
        assert (out / name).exists()
    totals = (out / "period_totals.csv").read_text(encoding="utf-8").splitlines()
    assert len(totals) == 27


def test_import(run, tmp_path):
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps(
            {
                "movements": [{"kind": "ingreso", "amount": 100, "date": "2025-01-15"}],
                "cards": [{"name": "Oro", "cut_off_day": 10}],
                "paid_marks": [{"item_id": ""}],
            }
        ),
        encoding="utf-8",
    )
    result = run("import", str(path))
    assert result.exit_code == 0
    assert "Imported: 2 records" in result.output
    assert "Errors: 1" in result.output
    assert "Oro" in run("card", "list").output
