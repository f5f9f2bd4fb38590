"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerkit.database.sqlalchemy_db import SQLAlchemyDatabase
from ledgerkit.notifications import ChangeNotifier


def create_sqlite_database(
    database_path: Optional[str] = None, notifier: Optional[ChangeNotifier] = None
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERKIT_DB_PATH
            environment variable, then defaults to ~/.ledgerkit/ledger.db
        notifier: Optional shared change notifier

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("LEDGERKIT_DB_PATH")

    if database_path is None:
        # Default to ~/.ledgerkit/ledger.db
        home = Path.home()
        db_dir = home / ".ledgerkit"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledger.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url, notifier=notifier)
