"""Chart-of-accounts CSV import service."""

import csv
from pathlib import Path

from ledgerkit.database.base import Database
from ledgerkit.domain.account import AccountRegistry, REQUIRED_IMPORT_COLUMNS
from ledgerkit.domain.entities import ImportResult
from ledgerkit.domain.errors import MissingColumnsError, missing_columns
from ledgerkit.logging_setup import get_logger

logger = get_logger(__name__)


class CSVImportService:
    """Service for importing accounts from CSV files."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.registry = AccountRegistry(db)

    def import_csv(self, csv_file_path: str) -> ImportResult:
        """Import accounts from a CSV file.

        The file needs a header row with at least ``code``, ``name`` and
        ``type``; see :meth:`AccountRegistry.bulk_import` for the rest.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            ImportResult with imported count and skipped codes

        Raises:
            MissingColumnsError: If the header lacks required columns
            FileNotFoundError: If CSV file doesn't exist
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise MissingColumnsError(missing_columns(list(REQUIRED_IMPORT_COLUMNS)))

            headers = {name.strip().lower() for name in reader.fieldnames if name}
            missing = [col for col in REQUIRED_IMPORT_COLUMNS if col not in headers]
            if missing:
                raise MissingColumnsError(missing_columns(missing))

            rows = list(reader)

        logger.info("Read %d row(s) from %s", len(rows), csv_path)
        return self.registry.bulk_import(rows)
