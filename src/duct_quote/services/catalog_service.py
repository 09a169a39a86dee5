"""
Service Catalog Service - base prices and add-on services.

Both live in service_prices.csv: the base price keys drive the quote engine,
every other row is an optional add-on service.
"""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..data.load_config import BASE_PRICE_KEYS, TRUE_VALUES
from .table_store import (
    CsvTable, DuplicateRecordError, RecordNotFoundError, format_amount, now_iso
)

logger = logging.getLogger(__name__)

DISPLAY_NAMES = {
    'hvac_system_charge': 'Additional HVAC System Charge',
    'duct_clean_seal_per_hvac': 'Clean & Seal Per HVAC System',
    'partner_discount_percent': 'Partner Discount Percentage',
    'dryer_vent': 'Dryer Vent Cleaning',
    'anti_microbial_fogging': 'Anti-Microbial Fogging',
    'evap_coil_cleaning': 'In-place Evap Coil Cleaning',
    'outdoor_coil_cleaning': 'Outdoor Coil Cleaning',
    'bathroom_fan_cleaning': 'Bathroom Fan Cleaning',
}


def service_key(name: str) -> str:
    """'Dryer Vent (Large)' -> 'dryer_vent_large'."""
    key = re.sub(r'\s+', '_', name.strip().lower())
    return re.sub(r'[^a-z0-9_]', '', key)


def display_name(service_name: str) -> str:
    if service_name in DISPLAY_NAMES:
        return DISPLAY_NAMES[service_name]
    return ' '.join(word.capitalize() for word in service_name.split('_'))


@dataclass
class ServicePrice:
    """A row of the service price table."""
    service_name: str
    price: float
    description: str = ""
    is_hidden: bool = False
    updated_at: Optional[str] = None

    @property
    def is_base_price(self) -> bool:
        return self.service_name in BASE_PRICE_KEYS

    @property
    def display_name(self) -> str:
        return display_name(self.service_name)

    def to_csv_row(self) -> dict:
        return {
            'service_name': self.service_name,
            'price': format_amount(self.price),
            'description': self.description,
            'is_hidden': 'true' if self.is_hidden else 'false',
            'updated_at': self.updated_at or '',
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'ServicePrice':
        return cls(
            service_name=row.get('service_name', ''),
            price=float(row.get('price') or 0),
            description=row.get('description', ''),
            is_hidden=(row.get('is_hidden') or '').lower() in TRUE_VALUES,
            updated_at=row.get('updated_at') or None,
        )


def _clean_price(price) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise ValueError("Please enter a valid price.") from None
    if value < 0 or value != value:
        raise ValueError("Price must be a positive number.")
    return value


class ServiceCatalogService:
    """Service for managing base prices and add-on services."""

    CSV_COLUMNS = ['service_name', 'price', 'description', 'is_hidden', 'updated_at']

    def __init__(self, service_csv_path: Path):
        self.table = CsvTable(service_csv_path, self.CSV_COLUMNS)

    def list_services(self, include_hidden: bool = True) -> list[ServicePrice]:
        services = [
            ServicePrice.from_csv_row(r) for r in self.table.read_rows() if r['service_name']
        ]
        if not include_hidden:
            services = [s for s in services if not s.is_hidden]
        return services

    def list_base_prices(self) -> list[ServicePrice]:
        return [s for s in self.list_services() if s.is_base_price]

    def list_add_ons(self, include_hidden: bool = True) -> list[ServicePrice]:
        add_ons = [s for s in self.list_services(include_hidden) if not s.is_base_price]
        return sorted(add_ons, key=lambda s: s.service_name)

    def get_service(self, service_name: str) -> Optional[ServicePrice]:
        for service in self.list_services():
            if service.service_name == service_name:
                return service
        return None

    def update_price(self, service_name: str, price) -> ServicePrice:
        """Set the price of a base price or add-on."""
        return self.update_service(service_name, {'price': price})

    def create_add_on(self, name: str, price, description: str = "") -> ServicePrice:
        """Add an add-on service; the key is the snake_case form of name."""
        if not name or not name.strip():
            raise ValueError("Please enter a service name.")
        key = service_key(name)
        if not key:
            raise ValueError("Service name must contain letters or digits.")
        price = _clean_price(price)

        services = self.list_services()
        if any(s.service_name == key for s in services):
            raise DuplicateRecordError("This service name already exists.")

        service = ServicePrice(
            service_name=key,
            price=price,
            description=description.strip() or name.strip(),
            is_hidden=False,
            updated_at=now_iso(),
        )
        services.append(service)
        self._write(services)
        logger.info("Added add-on service %s at %.2f", key, price)
        return service

    def update_service(self, service_name: str, updates: dict) -> ServicePrice:
        """
        Update price and/or description of a service.

        Both fields are checked before anything is written, so a rejected
        update leaves the table unchanged.
        """
        price = updates.get('price')
        if price is not None:
            price = _clean_price(price)
            if service_name == 'partner_discount_percent' and price > 100:
                raise ValueError("Partner discount must be between 0 and 100 percent.")

        description = updates.get('description')
        if description is not None:
            description = description.strip()
            if not description:
                raise ValueError("Service description cannot be empty.")

        services = self.list_services()
        for service in services:
            if service.service_name != service_name:
                continue
            if price is not None:
                service.price = price
            if description is not None:
                service.description = description
            service.updated_at = now_iso()
            self._write(services)
            logger.info("Updated service %s", service_name)
            return service

        raise RecordNotFoundError(f"Service '{service_name}' not found")

    def toggle_hidden(self, service_name: str) -> ServicePrice:
        """Hide a visible add-on or show a hidden one."""
        services = self.list_services()

        for service in services:
            if service.service_name != service_name:
                continue
            if service.is_base_price:
                raise ValueError(f"Base price '{service_name}' cannot be hidden")
            service.is_hidden = not service.is_hidden
            service.updated_at = now_iso()
            self._write(services)
            logger.info("Service %s %s", service_name, 'hidden' if service.is_hidden else 'shown')
            return service

        raise RecordNotFoundError(f"Service '{service_name}' not found")

    def delete_service(self, service_name: str) -> bool:
        if service_name in BASE_PRICE_KEYS:
            raise ValueError(f"Base price '{service_name}' cannot be deleted")

        services = self.list_services()
        remaining = [s for s in services if s.service_name != service_name]
        if len(remaining) == len(services):
            raise RecordNotFoundError(f"Service '{service_name}' not found")

        self._write(remaining)
        logger.info("Deleted service %s", service_name)
        return True

    def _write(self, services: list[ServicePrice]):
        self.table.write_rows([s.to_csv_row() for s in services])
