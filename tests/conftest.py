"""Shared pytest fixtures for catorcena tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest
import structlog

from catorcena.database.factories import create_sqlite_database
from catorcena.domain.card import CardService
from catorcena.domain.debit import DebitAccountService
from catorcena.domain.entities import CardAccount, Charge, InstallmentPlan, OneOff
from catorcena.domain.movement import MovementService
from catorcena.domain.paid import PaidService


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging configuration left behind by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def movement_service(temp_db):
    """Create a MovementService with a temporary database."""
    return MovementService(temp_db)


@pytest.fixture
def card_service(temp_db):
    """Create a CardService with a temporary database."""
    return CardService(temp_db)


@pytest.fixture
def debit_service(temp_db):
    """Create a DebitAccountService with a temporary database."""
    return DebitAccountService(temp_db)


@pytest.fixture
def paid_service(temp_db):
    """Create a PaidService with a temporary database."""
    return PaidService(temp_db)


@pytest.fixture
def card():
    """Card with cut-off day 10 and 20 grace days, no charges."""
    return CardAccount(
        id="1",
        name="Oro",
        cut_off_day=10,
        grace_period_days=20,
        credit_limit=Decimal("30000"),
    )


@pytest.fixture
def msi_charge():
    """1500 bought on 2025-01-15 in 3 interest-free months."""
    return Charge(
        id="7",
        description="Laptop",
        amount=Decimal("1500"),
        purchase_date=date(2025, 1, 15),
        recurrence=OneOff(date(2025, 1, 15)),
        installments=InstallmentPlan(months=3),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
