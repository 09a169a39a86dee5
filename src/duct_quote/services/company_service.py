"""
Company Service - partner companies technicians can work under.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .table_store import CsvTable, DuplicateRecordError, RecordNotFoundError, now_iso

logger = logging.getLogger(__name__)


@dataclass
class Company:
    company_id: str
    name: str
    updated_at: Optional[str] = None

    def to_csv_row(self) -> dict:
        return {'company_id': self.company_id, 'name': self.name, 'updated_at': self.updated_at or ''}

    @classmethod
    def from_csv_row(cls, row: dict) -> 'Company':
        return cls(
            company_id=row.get('company_id', ''),
            name=row.get('name', ''),
            updated_at=row.get('updated_at') or None,
        )


class CompanyService:
    """Service for managing companies. Names are unique, ignoring case."""

    CSV_COLUMNS = ['company_id', 'name', 'updated_at']

    def __init__(self, company_csv_path: Path):
        self.table = CsvTable(company_csv_path, self.CSV_COLUMNS)

    def list_companies(self) -> list[Company]:
        companies = [Company.from_csv_row(r) for r in self.table.read_rows() if r['company_id']]
        return sorted(companies, key=lambda c: c.name.lower())

    def get_company(self, company_id: str) -> Optional[Company]:
        for company in self.list_companies():
            if company.company_id == str(company_id):
                return company
        return None

    def create_company(self, name: str) -> Company:
        name = self._clean_name(name)
        companies = self.list_companies()
        self._check_duplicate(companies, name)

        company = Company(company_id=self._next_id(companies), name=name, updated_at=now_iso())
        companies.append(company)
        self._write(companies)
        logger.info("Added company %s (%s)", company.name, company.company_id)
        return company

    def rename_company(self, company_id: str, name: str) -> Company:
        name = self._clean_name(name)
        companies = self.list_companies()

        for company in companies:
            if company.company_id == str(company_id):
                self._check_duplicate(companies, name, exclude_id=company.company_id)
                company.name = name
                company.updated_at = now_iso()
                self._write(companies)
                logger.info("Renamed company %s to %s", company_id, name)
                return company

        raise RecordNotFoundError(f"Company '{company_id}' not found")

    def delete_company(self, company_id: str) -> bool:
        companies = self.list_companies()
        remaining = [c for c in companies if c.company_id != str(company_id)]
        if len(remaining) == len(companies):
            raise RecordNotFoundError(f"Company '{company_id}' not found")

        self._write(remaining)
        logger.info("Deleted company %s", company_id)
        return True

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("Please enter a company name.")
        return name

    @staticmethod
    def _check_duplicate(companies: list[Company], name: str, exclude_id: Optional[str] = None):
        for company in companies:
            if company.company_id != exclude_id and company.name.lower() == name.lower():
                raise DuplicateRecordError("This company name already exists.")

    @staticmethod
    def _next_id(companies: list[Company]) -> str:
        numeric = [int(c.company_id) for c in companies if c.company_id.isdigit()]
        return str(max(numeric, default=0) + 1)

    def _write(self, companies: list[Company]):
        self.table.write_rows([c.to_csv_row() for c in companies])
