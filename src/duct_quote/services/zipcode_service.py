"""
Zipcode Service - CRUD operations for zipcode surcharges.
Handles reading/writing zipcode_charges.csv.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..engine.pricing_engine import normalize_zipcode
from .table_store import (
    CsvTable, DuplicateRecordError, RecordNotFoundError, format_amount, now_iso
)

logger = logging.getLogger(__name__)


@dataclass
class ZipcodeCharge:
    """A service-area zipcode and its surcharge."""
    zipcode: str
    charge: float
    updated_at: Optional[str] = None

    def to_csv_row(self) -> dict:
        return {
            'zipcode': self.zipcode,
            'charge': format_amount(self.charge),
            'updated_at': self.updated_at or '',
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'ZipcodeCharge':
        return cls(
            zipcode=row.get('zipcode', ''),
            charge=float(row.get('charge') or 0),
            updated_at=row.get('updated_at') or None,
        )


def clean_zipcode(zipcode: str) -> str:
    """Normalize and check a zipcode, raising ValueError unless it is 5 digits."""
    cleaned = normalize_zipcode(zipcode)
    if len(cleaned) != 5 or not cleaned.isdigit():
        raise ValueError("Zipcode must be exactly 5 digits.")
    return cleaned


def _clean_charge(charge) -> float:
    try:
        value = float(charge)
    except (TypeError, ValueError):
        raise ValueError("Charge must be a positive number.") from None
    if value < 0 or value != value:
        raise ValueError("Charge must be a positive number.")
    return value


class ZipcodeService:
    """Service for managing zipcode surcharges."""

    CSV_COLUMNS = ['zipcode', 'charge', 'updated_at']

    def __init__(self, zipcode_csv_path: Path):
        self.table = CsvTable(zipcode_csv_path, self.CSV_COLUMNS)

    def list_zipcodes(self) -> list[ZipcodeCharge]:
        """List all zipcodes sorted by zipcode."""
        rows = [ZipcodeCharge.from_csv_row(r) for r in self.table.read_rows() if r['zipcode']]
        return sorted(rows, key=lambda z: z.zipcode)

    def get_zipcode(self, zipcode: str) -> Optional[ZipcodeCharge]:
        zipcode = normalize_zipcode(zipcode)
        for entry in self.list_zipcodes():
            if entry.zipcode == zipcode:
                return entry
        return None

    def create_zipcode(self, zipcode: str, charge: float) -> ZipcodeCharge:
        """Add a zipcode; an existing zipcode must be updated instead."""
        zipcode = clean_zipcode(zipcode)
        charge = _clean_charge(charge)

        entries = self.list_zipcodes()
        if any(e.zipcode == zipcode for e in entries):
            raise DuplicateRecordError(f"Zipcode {zipcode} already exists. Use edit to update it.")

        entry = ZipcodeCharge(zipcode=zipcode, charge=charge, updated_at=now_iso())
        entries.append(entry)
        self._write(entries)
        logger.info("Added zipcode %s with charge %.2f", zipcode, charge)
        return entry

    def update_zipcode(self, zipcode: str, charge: float) -> ZipcodeCharge:
        """Change the surcharge of an existing zipcode."""
        zipcode = normalize_zipcode(zipcode)
        charge = _clean_charge(charge)

        entries = self.list_zipcodes()
        for entry in entries:
            if entry.zipcode == zipcode:
                entry.charge = charge
                entry.updated_at = now_iso()
                self._write(entries)
                logger.info("Updated zipcode %s to charge %.2f", zipcode, charge)
                return entry

        raise RecordNotFoundError(f"Zipcode {zipcode} not found")

    def delete_zipcode(self, zipcode: str) -> bool:
        zipcode = normalize_zipcode(zipcode)
        entries = self.list_zipcodes()
        remaining = [e for e in entries if e.zipcode != zipcode]

        if len(remaining) == len(entries):
            raise RecordNotFoundError(f"Zipcode {zipcode} not found")

        self._write(remaining)
        logger.info("Deleted zipcode %s", zipcode)
        return True

    def grouped_by_charge(self) -> dict[float, list[str]]:
        """Zipcodes grouped by surcharge, charges in ascending order."""
        groups: dict[float, list[str]] = {}
        for entry in self.list_zipcodes():
            groups.setdefault(entry.charge, []).append(entry.zipcode)
        return {charge: groups[charge] for charge in sorted(groups)}

    def get_stats(self) -> dict:
        """Get statistics about the surcharge table."""
        entries = self.list_zipcodes()
        charges = sorted({e.charge for e in entries})
        return {
            'total': len(entries),
            'distinct_charges': len(charges),
            'min_charge': charges[0] if charges else 0.0,
            'max_charge': charges[-1] if charges else 0.0,
        }

    def _write(self, entries: list[ZipcodeCharge]):
        self.table.write_rows([e.to_csv_row() for e in sorted(entries, key=lambda z: z.zipcode)])
