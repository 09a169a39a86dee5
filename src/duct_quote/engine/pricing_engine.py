"""
Quote Engine - deterministic duct-cleaning quote calculation.

Maps (square footage, additional HVAC systems, zipcode, add-ons) onto an
itemized breakdown:
- Square-footage tier lookup with highest-tier fallback
- Flat charge per additional HVAC system
- Zipcode surcharge (unknown zipcodes carry no surcharge)
- Partner discount on the subtotal
- Clean & Seal alternate price (tiered for one system, per unit otherwise)
- Execution trace for every resolution step
"""
import logging
from typing import Optional

from ..config.settings import get_settings, Settings
from ..data import load_config
from .models import AddOnLine, PricingConfig, QuoteBreakdown, QuoteRequest, TraceStep
from .tiers import tier_price

logger = logging.getLogger(__name__)


def _money(amount: float) -> str:
    return f"${amount:,.2f}"


def normalize_zipcode(zipcode: str) -> str:
    """Remove spaces and hyphens from a zipcode."""
    return "".join(ch for ch in str(zipcode) if not ch.isspace() and ch != "-")


def compute_zipcode_charge(zipcode: str, config: PricingConfig) -> float:
    """Surcharge for a zipcode; zipcodes not in the table cost nothing extra."""
    return config.zipcode_charges.get(normalize_zipcode(zipcode), 0)


def get_sqft_charge(square_footage: float, config: PricingConfig) -> float:
    """Flat price of the square-footage tier, highest tier when none matches."""
    price, _, _ = tier_price(config.sqft_tiers, square_footage)
    return price


def get_clean_and_seal_price(
    square_footage: float,
    additional_hvac_systems: int,
    config: PricingConfig
) -> float:
    """
    Clean & Seal price.

    A home with a single HVAC system is priced by the Clean & Seal tier
    table. Once there are extra systems, every unit (including the first)
    is charged clean_and_seal_per_unit instead.
    """
    if additional_hvac_systems == 0:
        price, _, _ = tier_price(config.clean_and_seal_tiers, square_footage)
        return price
    return (additional_hvac_systems + 1) * config.clean_and_seal_per_unit


def compute_quote(request: QuoteRequest, config: PricingConfig) -> QuoteBreakdown:
    """
    Calculate a quote.

    Pure function: reads only its arguments and returns a new breakdown.
    Inputs are expected to be validated already (see engine.validation).
    """
    trace = []
    warnings = []

    # 1. Square footage tier
    sqft_charge, sqft_tier, fell_back = tier_price(config.sqft_tiers, request.square_footage)
    if fell_back:
        trace.append(TraceStep(
            "Square Footage",
            f"No tier contains {request.square_footage:g} sqft, using highest tier {sqft_tier.label}",
            _money(sqft_charge),
        ))
    else:
        trace.append(TraceStep("Square Footage", f"Tier {sqft_tier.label}", _money(sqft_charge)))

    # 2. Zipcode surcharge
    zipcode = normalize_zipcode(request.zipcode)
    zipcode_charge = compute_zipcode_charge(zipcode, config)
    if zipcode in config.zipcode_charges:
        trace.append(TraceStep("Zipcode", f"Surcharge for {zipcode}", _money(zipcode_charge)))
    else:
        trace.append(TraceStep("Zipcode", f"{zipcode} not in surcharge table, no charge", _money(0)))

    # 3. Additional HVAC systems
    hvac_charge = request.additional_hvac_systems * config.per_additional_hvac_charge
    trace.append(TraceStep(
        "HVAC Systems",
        f"{request.additional_hvac_systems} additional × {_money(config.per_additional_hvac_charge)}",
        _money(hvac_charge),
    ))

    # 4. Subtotal, discount, total
    subtotal = sqft_charge + hvac_charge + zipcode_charge
    discount = subtotal * config.partner_discount_percent / 100
    total = subtotal - discount
    trace.append(TraceStep("Subtotal", "Square footage + HVAC + zipcode", _money(subtotal)))
    trace.append(TraceStep(
        "Partner Discount", f"{config.partner_discount_percent:g}% of subtotal", _money(discount)
    ))
    trace.append(TraceStep("Total", "Subtotal - discount", _money(total)))

    # 5. Clean & Seal
    clean_and_seal_price = get_clean_and_seal_price(
        request.square_footage, request.additional_hvac_systems, config
    )
    if request.additional_hvac_systems == 0:
        description = "Single system, priced by Clean & Seal tier"
    else:
        description = (
            f"{request.total_hvac_systems} units × {_money(config.clean_and_seal_per_unit)}"
        )
    trace.append(TraceStep("Clean & Seal", description, _money(clean_and_seal_price)))
    clean_and_seal_discount = clean_and_seal_price * config.partner_discount_percent / 100

    # Add-on services are itemized beside the quote, never in the subtotal
    add_ons = []
    for key in request.add_on_services:
        service = config.add_on_services.get(key)
        if service is None:
            warnings.append(f"Unknown add-on service '{key}' ignored")
            continue
        add_ons.append(AddOnLine(
            service_name=service.service_name,
            description=service.description or service.service_name,
            price=service.price,
        ))
        trace.append(TraceStep("Add-On", service.description or key, _money(service.price)))

    # 6. Assemble
    return QuoteBreakdown(
        sqft_charge=sqft_charge,
        hvac_charge=hvac_charge,
        zipcode_charge=zipcode_charge,
        subtotal=subtotal,
        discount=discount,
        total=total,
        clean_and_seal_price=clean_and_seal_price,
        clean_and_seal_discount=clean_and_seal_discount,
        clean_and_seal_total=clean_and_seal_price - clean_and_seal_discount,
        sqft_tier_label=sqft_tier.label,
        add_ons=tuple(add_ons),
        add_on_total=sum(line.price for line in add_ons),
        warnings=tuple(warnings),
        trace=tuple(trace),
    )


class PricingEngine:
    """
    Quote engine bound to the current pricing snapshot.

    The snapshot is loaded once and replaced wholesale by reload_data();
    calculations never modify it.
    """

    def __init__(self, settings: Optional[Settings] = None, config: Optional[PricingConfig] = None):
        """Initialize engine with the given snapshot, or load one from the pricing tables."""
        self.settings = settings or get_settings()
        if config is None:
            config = load_config.load_pricing_config(self.settings)
        self.config = config
        logger.info("Pricing engine ready (config version %s)", self.config.version)

    def reload_data(self):
        """Reload the pricing tables from disk."""
        self.config = load_config.load_pricing_config(self.settings)
        logger.info("Pricing config reloaded (version %s)", self.config.version)

    def get_zipcode_charge(self, zipcode: str) -> float:
        return compute_zipcode_charge(zipcode, self.config)

    def calculate(self, request: QuoteRequest) -> QuoteBreakdown:
        """Calculate a quote against the current snapshot."""
        config = self.config
        breakdown = compute_quote(request, config)
        logger.debug(
            "Quote calculated: sqft=%s hvac=%s zip=%s total=%.2f clean_seal=%.2f",
            request.square_footage,
            request.additional_hvac_systems,
            request.zipcode,
            breakdown.total,
            breakdown.clean_and_seal_price,
        )
        for warning in breakdown.warnings:
            logger.warning(warning)
        return breakdown
