"""Formatting helpers for showing a breakdown to a technician."""
from .models import PricingConfig, QuoteBreakdown, QuoteRequest


def format_currency(amount: float) -> str:
    return f"${amount:,.2f}"


def breakdown_rows(
    request: QuoteRequest,
    breakdown: QuoteBreakdown,
    config: PricingConfig
) -> list[tuple[str, str]]:
    """Ordered (label, amount) rows for the price breakdown card."""
    rows = [
        (f"Square Footage ({breakdown.sqft_tier_label})", format_currency(breakdown.sqft_charge)),
        (
            f"HVAC Systems ({request.additional_hvac_systems} × "
            f"{format_currency(config.per_additional_hvac_charge)})",
            format_currency(breakdown.hvac_charge),
        ),
        (f"Location Charge (Zipcode: {request.zipcode})", format_currency(breakdown.zipcode_charge)),
        ("Subtotal", format_currency(breakdown.subtotal)),
        (
            f"Partner Discount ({config.partner_discount_percent:g}%)",
            f"-{format_currency(breakdown.discount)}",
        ),
        ("Total", format_currency(breakdown.total)),
    ]
    for line in breakdown.add_ons:
        rows.append((f"Add-On: {line.description}", format_currency(line.price)))
    return rows
