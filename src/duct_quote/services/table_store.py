"""
CSV table store shared by the admin services.

Each admin table is a small CSV file rewritten in full on every change.
"""
import csv
import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class RecordNotFoundError(ValueError):
    """No row with the requested key."""


class DuplicateRecordError(ValueError):
    """A row with the same key already exists."""


def now_iso() -> str:
    return datetime.now().isoformat(timespec='seconds')


def format_amount(value: float) -> str:
    """Write 300.0 as '300' and 12499.99 as '12499.99', without rounding."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


class CsvTable:
    """A CSV file with a fixed column order."""

    def __init__(self, path: Path, columns: list[str]):
        self.path = Path(path)
        self.columns = columns

    def read_rows(self) -> list[dict]:
        """Read all rows; a missing file is an empty table."""
        if not self.path.exists():
            return []
        with open(self.path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            return [
                {col: (row.get(col) or '').strip() for col in self.columns}
                for row in reader
            ]

    def write_rows(self, rows: list[dict]):
        """Write rows back to CSV."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.columns, extrasaction='ignore')
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        logger.debug("Wrote %d rows to %s", len(rows), self.path)
