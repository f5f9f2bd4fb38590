"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
from decimal import Decimal
from pathlib import Path
import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.posting import LedgerPoster
from ledgerkit.domain.projection import BalanceProjector
from ledgerkit.domain.reconciliation import ReconciliationChecker


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    db.session_factory.kw["bind"].dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def registry(temp_db):
    """Create an AccountRegistry with a temporary database."""
    return AccountRegistry(temp_db)


@pytest.fixture
def poster(temp_db):
    """Create a LedgerPoster with a temporary database."""
    return LedgerPoster(temp_db)


@pytest.fixture
def projector(temp_db):
    """Create a BalanceProjector with a temporary database."""
    return BalanceProjector(temp_db)


@pytest.fixture
def checker(temp_db):
    """Create a ReconciliationChecker with a temporary database."""
    return ReconciliationChecker(temp_db)


@pytest.fixture
def chart(registry):
    """Create a small chart of accounts and return accounts keyed by name."""
    cash = registry.create_account("1110", "Cash", AccountType.ASSET)
    sales = registry.create_account("4100", "Sales", AccountType.REVENUE)
    payable = registry.create_account(
        "2110", "Accounts Payable", AccountType.LIABILITY, initial_balance=Decimal("200")
    )
    cogs = registry.create_account("5100", "COGS", AccountType.EXPENSE)
    equity = registry.create_account(
        "3100", "Owner Equity", AccountType.EQUITY, initial_balance=Decimal("-200")
    )
    return {"cash": cash, "sales": sales, "payable": payable, "cogs": cogs, "equity": equity}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
