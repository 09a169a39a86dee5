"""
Shared API state - the live engine and admin services.

Built lazily so importing the app does not touch the pricing tables; the
getters double as FastAPI dependencies.
"""
from typing import Optional

from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.catalog_service import ServiceCatalogService
from ..services.company_service import CompanyService
from ..services.zipcode_service import ZipcodeService

_engine: Optional[PricingEngine] = None


def get_engine() -> PricingEngine:
    global _engine
    if _engine is None:
        _engine = PricingEngine(get_settings())
    return _engine


def get_zipcode_service() -> ZipcodeService:
    return ZipcodeService(get_settings().zipcode_charges)


def get_catalog_service() -> ServiceCatalogService:
    return ServiceCatalogService(get_settings().service_prices)


def get_company_service() -> CompanyService:
    return CompanyService(get_settings().companies)
