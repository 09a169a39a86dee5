"""
Admin API - FastAPI router for pricing table maintenance.

Every route requires the admin password in the X-Admin-Password header.
Changes to zipcodes or service prices reload the live engine.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field

from ..config.settings import Settings, get_settings
from ..engine import PricingEngine
from ..services.catalog_service import ServiceCatalogService
from ..services.company_service import CompanyService
from ..services.table_store import DuplicateRecordError, RecordNotFoundError
from ..services.zipcode_analyzer import (
    UTAH_COUNTIES, analyze_county, county_coverage, find_nearby_missing
)
from ..services.zipcode_service import ZipcodeService
from .state import get_catalog_service, get_company_service, get_engine, get_zipcode_service

logger = logging.getLogger(__name__)


def require_admin(
    x_admin_password: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
):
    """Plain password comparison against the configured admin password."""
    if not x_admin_password:
        raise HTTPException(status_code=401, detail="Please enter the admin password.")
    if x_admin_password != settings.admin_password:
        logger.warning("Rejected admin request with incorrect password")
        raise HTTPException(status_code=401, detail="Incorrect password. Please try again.")


router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _http_error(e: ValueError) -> HTTPException:
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DuplicateRecordError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# Pydantic models for API

class ZipcodeCreate(BaseModel):
    zipcode: str
    charge: float


class ZipcodeUpdate(BaseModel):
    charge: float


class ZipcodeResponse(BaseModel):
    zipcode: str
    charge: float
    updated_at: Optional[str] = None


class ServiceCreate(BaseModel):
    name: str
    price: float
    description: str = ""


class ServiceUpdate(BaseModel):
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None


class ServiceResponse(BaseModel):
    service_name: str
    display_name: str
    price: float
    description: str
    is_hidden: bool
    is_base_price: bool
    updated_at: Optional[str] = None


class CompanyCreate(BaseModel):
    name: str


class CompanyResponse(BaseModel):
    company_id: str
    name: str
    updated_at: Optional[str] = None


def _service_response(service) -> ServiceResponse:
    return ServiceResponse(
        service_name=service.service_name,
        display_name=service.display_name,
        price=service.price,
        description=service.description,
        is_hidden=service.is_hidden,
        is_base_price=service.is_base_price,
        updated_at=service.updated_at,
    )


# Zipcodes

@router.get("/zipcodes", response_model=list[ZipcodeResponse])
def list_zipcodes(zipcodes: ZipcodeService = Depends(get_zipcode_service)):
    """List all zipcode surcharges."""
    return [ZipcodeResponse(**z.__dict__) for z in zipcodes.list_zipcodes()]


@router.get("/zipcodes/stats")
def zipcode_stats(zipcodes: ZipcodeService = Depends(get_zipcode_service)):
    return zipcodes.get_stats()


@router.get("/zipcodes/grouped")
def zipcodes_grouped(zipcodes: ZipcodeService = Depends(get_zipcode_service)):
    """Zipcodes grouped by surcharge."""
    return [
        {"charge": charge, "zipcodes": codes}
        for charge, codes in zipcodes.grouped_by_charge().items()
    ]


@router.post("/zipcodes", response_model=ZipcodeResponse)
def create_zipcode(
    data: ZipcodeCreate,
    zipcodes: ZipcodeService = Depends(get_zipcode_service),
    engine: PricingEngine = Depends(get_engine),
):
    try:
        created = zipcodes.create_zipcode(data.zipcode, data.charge)
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return ZipcodeResponse(**created.__dict__)


@router.put("/zipcodes/{zipcode}", response_model=ZipcodeResponse)
def update_zipcode(
    zipcode: str,
    data: ZipcodeUpdate,
    zipcodes: ZipcodeService = Depends(get_zipcode_service),
    engine: PricingEngine = Depends(get_engine),
):
    try:
        updated = zipcodes.update_zipcode(zipcode, data.charge)
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return ZipcodeResponse(**updated.__dict__)


@router.delete("/zipcodes/{zipcode}")
def delete_zipcode(
    zipcode: str,
    zipcodes: ZipcodeService = Depends(get_zipcode_service),
    engine: PricingEngine = Depends(get_engine),
):
    try:
        zipcodes.delete_zipcode(zipcode)
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return {"success": True, "message": f"Zipcode {zipcode} deleted"}


@router.get("/zipcodes/{zipcode}/nearby-missing")
def nearby_missing(zipcode: str, zipcodes: ZipcodeService = Depends(get_zipcode_service)):
    """Unpriced zipcodes within 20 of the given one."""
    existing = [z.zipcode for z in zipcodes.list_zipcodes()]
    try:
        missing = find_nearby_missing(zipcode, existing)
    except ValueError as e:
        raise _http_error(e)
    return {"zipcode": zipcode, "missing": missing}


# County coverage

@router.get("/counties")
def list_county_coverage(zipcodes: ZipcodeService = Depends(get_zipcode_service)):
    existing = [z.zipcode for z in zipcodes.list_zipcodes()]
    return [county_coverage(county, existing) for county in UTAH_COUNTIES]


@router.get("/counties/{county}/missing")
def county_missing(county: str, zipcodes: ZipcodeService = Depends(get_zipcode_service)):
    if county not in UTAH_COUNTIES:
        raise HTTPException(status_code=404, detail=f"Unknown county '{county}'")
    existing = [z.zipcode for z in zipcodes.list_zipcodes()]
    return {"county": county, "missing": analyze_county(county, existing)}


# Services and base prices

@router.get("/services", response_model=list[ServiceResponse])
def list_services(
    include_hidden: bool = True,
    catalog: ServiceCatalogService = Depends(get_catalog_service),
):
    """List base prices and add-on services."""
    return [_service_response(s) for s in catalog.list_services(include_hidden=include_hidden)]


@router.post("/services", response_model=ServiceResponse)
def create_service(
    data: ServiceCreate,
    catalog: ServiceCatalogService = Depends(get_catalog_service),
    engine: PricingEngine = Depends(get_engine),
):
    """Create a new add-on service."""
    try:
        created = catalog.create_add_on(data.name, data.price, data.description)
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return _service_response(created)


@router.put("/services/{service_name}", response_model=ServiceResponse)
def update_service(
    service_name: str,
    updates: ServiceUpdate,
    catalog: ServiceCatalogService = Depends(get_catalog_service),
    engine: PricingEngine = Depends(get_engine),
):
    """Update price and/or description of a service."""
    try:
        updated = catalog.update_service(service_name, updates.model_dump(exclude_unset=True))
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return _service_response(updated)


@router.post("/services/{service_name}/toggle-hidden", response_model=ServiceResponse)
def toggle_service(
    service_name: str,
    catalog: ServiceCatalogService = Depends(get_catalog_service),
    engine: PricingEngine = Depends(get_engine),
):
    try:
        toggled = catalog.toggle_hidden(service_name)
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return _service_response(toggled)


@router.delete("/services/{service_name}")
def delete_service(
    service_name: str,
    catalog: ServiceCatalogService = Depends(get_catalog_service),
    engine: PricingEngine = Depends(get_engine),
):
    try:
        catalog.delete_service(service_name)
    except ValueError as e:
        raise _http_error(e)
    engine.reload_data()
    return {"success": True, "message": f"Service '{service_name}' deleted"}


# Companies

@router.get("/companies", response_model=list[CompanyResponse])
def list_companies(companies: CompanyService = Depends(get_company_service)):
    return [CompanyResponse(**c.__dict__) for c in companies.list_companies()]


@router.post("/companies", response_model=CompanyResponse)
def create_company(data: CompanyCreate, companies: CompanyService = Depends(get_company_service)):
    try:
        created = companies.create_company(data.name)
    except ValueError as e:
        raise _http_error(e)
    return CompanyResponse(**created.__dict__)


@router.put("/companies/{company_id}", response_model=CompanyResponse)
def rename_company(
    company_id: str,
    data: CompanyCreate,
    companies: CompanyService = Depends(get_company_service),
):
    try:
        renamed = companies.rename_company(company_id, data.name)
    except ValueError as e:
        raise _http_error(e)
    return CompanyResponse(**renamed.__dict__)


@router.delete("/companies/{company_id}")
def delete_company(company_id: str, companies: CompanyService = Depends(get_company_service)):
    try:
        companies.delete_company(company_id)
    except ValueError as e:
        raise _http_error(e)
    return {"success": True, "message": f"Company '{company_id}' deleted"}


@router.post("/reload")
def reload_config(engine: PricingEngine = Depends(get_engine)):
    """Force a reload of the pricing tables."""
    try:
        engine.reload_data()
    except (ValueError, FileNotFoundError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True, "version": engine.config.version}
