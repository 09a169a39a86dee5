import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from duct_quote import __version__
from duct_quote.api.admin_api import router as admin_router
from duct_quote.api.state import get_engine
from duct_quote.config.logging_config import configure_logging
from duct_quote.engine import PricingEngine, QuoteInputError, QuoteRequest, validate_quote_request
from duct_quote.engine.display import breakdown_rows
from duct_quote.services.job_request import JobRequest, TechnicianInfo, build_job_payload

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Duct Quote API",
    description="Quote engine and job intake for duct cleaning technicians",
    version=__version__
)

# Enable CORS for the mobile/web front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_router)


class QuoteIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    square_footage: float = Field(alias="squareFootage", ge=0, allow_inf_nan=False)
    additional_hvac_systems: int = Field(alias="additionalHvacSystems", ge=0)
    zipcode: str
    add_on_services: list[str] = Field(default_factory=list, alias="addOnServices")

    def to_request(self) -> QuoteRequest:
        return QuoteRequest(
            square_footage=self.square_footage,
            additional_hvac_systems=self.additional_hvac_systems,
            zipcode=self.zipcode,
            add_on_services=tuple(self.add_on_services),
        )


class TechnicianIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(alias="companyName")
    company_id: Optional[str] = Field(default=None, alias="companyId")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    phone: str
    email: str


class JobRequestIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(alias="customerName")
    phone: str
    email: str
    address: str
    job_description: str = Field(alias="jobDescription")
    preferred_date: Optional[str] = Field(default=None, alias="preferredDate")
    quote: QuoteIn
    technician: Optional[TechnicianIn] = None


def _tier_dict(tier) -> dict:
    return {
        "min": tier.min,
        "max": None if tier.unbounded else tier.max,
        "price": tier.price,
        "label": tier.label,
    }


def _priced_request(quote: QuoteIn, engine: PricingEngine):
    try:
        request = validate_quote_request(quote.to_request())
    except QuoteInputError as e:
        raise HTTPException(status_code=400, detail={"title": e.title, "message": e.message})
    return request, engine.calculate(request)


@app.get("/")
async def root():
    return {"status": "online", "message": "Duct Quote API Active"}


@app.post("/quote")
async def calculate_quote(quote: QuoteIn, engine: PricingEngine = Depends(get_engine)):
    """Price a quote against the live config snapshot."""
    request, breakdown = _priced_request(quote, engine)
    return {
        "quote": breakdown.to_payload_dict(),
        "rows": [
            {"label": label, "amount": amount}
            for label, amount in breakdown_rows(request, breakdown, engine.config)
        ],
        "trace": [t.__dict__ for t in breakdown.trace],
        "configVersion": engine.config.version,
    }


@app.get("/config")
async def get_config(engine: PricingEngine = Depends(get_engine)):
    """Current pricing snapshot, without hidden add-ons."""
    config = engine.config
    return {
        "version": config.version,
        "sqftTiers": [_tier_dict(t) for t in config.sqft_tiers],
        "cleanAndSealTiers": [_tier_dict(t) for t in config.clean_and_seal_tiers],
        "cleanAndSealPerUnit": config.clean_and_seal_per_unit,
        "perAdditionalHvacCharge": config.per_additional_hvac_charge,
        "partnerDiscountPercent": config.partner_discount_percent,
        "zipcodeCount": len(config.zipcode_charges),
        "addOnServices": [
            {"serviceName": s.service_name, "price": s.price, "description": s.description}
            for s in config.visible_add_ons()
        ],
    }


@app.post("/job-requests")
async def submit_job_request(job_in: JobRequestIn, engine: PricingEngine = Depends(get_engine)):
    """Validate a job request, price it and return the CRM payload."""
    request, breakdown = _priced_request(job_in.quote, engine)

    job = JobRequest(
        customer_name=job_in.customer_name,
        phone=job_in.phone,
        email=job_in.email,
        address=job_in.address,
        job_description=job_in.job_description,
        preferred_date=job_in.preferred_date,
    )
    technician = None
    if job_in.technician is not None:
        technician = TechnicianInfo(**job_in.technician.model_dump())
        errors = technician.validate()
        if errors:
            raise HTTPException(status_code=400, detail="; ".join(errors))

    try:
        payload = build_job_payload(
            job, request, breakdown, technician=technician, config_version=engine.config.version
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Job request priced for %s: total %.2f", payload["customerName"], breakdown.total)
    return payload


@app.get("/system/status")
async def get_status(engine: PricingEngine = Depends(get_engine)):
    config = engine.config
    return {
        "engine_active": True,
        "config_version": config.version,
        "sqft_tiers": len(config.sqft_tiers),
        "clean_seal_tiers": len(config.clean_and_seal_tiers),
        "zipcodes": len(config.zipcode_charges),
        "add_on_services": len(config.add_on_services),
    }
