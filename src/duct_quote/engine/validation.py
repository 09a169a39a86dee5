"""
Input checks run before the engine is called.

The engine assumes valid input; these helpers are where bad input is
rejected. Nothing is clamped or defaulted.
"""
import math
from typing import Iterable

from .models import QuoteRequest
from .pricing_engine import normalize_zipcode


class QuoteInputError(ValueError):
    """Invalid quote input, with a short title for display."""

    def __init__(self, title: str, message: str):
        super().__init__(message)
        self.title = title
        self.message = message


def _check_square_footage(value: float):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise QuoteInputError("Invalid Input", "Please enter a valid square footage (0 or greater).")
    if not math.isfinite(value) or value < 0:
        raise QuoteInputError("Invalid Input", "Please enter a valid square footage (0 or greater).")


def _check_hvac_systems(value: int):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise QuoteInputError(
            "Invalid Input", "Please enter a valid number of HVAC systems (0 or greater)."
        )


def _check_zipcode(zipcode: str) -> str:
    cleaned = normalize_zipcode(zipcode)
    if len(cleaned) != 5 or not cleaned.isdigit():
        raise QuoteInputError("Invalid Zipcode", "Zipcode must be exactly 5 digits.")
    return cleaned


def validate_quote_request(request: QuoteRequest) -> QuoteRequest:
    """Raise QuoteInputError unless request satisfies the engine's preconditions."""
    _check_square_footage(request.square_footage)
    _check_hvac_systems(request.additional_hvac_systems)
    _check_zipcode(request.zipcode)
    return request


def parse_quote_form(
    square_footage: str,
    hvac_systems: str,
    zipcode: str,
    add_on_services: Iterable[str] = ()
) -> QuoteRequest:
    """Build a QuoteRequest from raw form text."""
    square_footage = (square_footage or "").strip()
    hvac_systems = (hvac_systems or "").strip()
    zipcode = (zipcode or "").strip()

    if not square_footage or not hvac_systems or not zipcode:
        raise QuoteInputError("Missing Information", "Please fill in all fields to generate a quote.")

    try:
        sqft = float(square_footage.replace(",", ""))
    except ValueError:
        raise QuoteInputError(
            "Invalid Input", "Please enter a valid square footage (0 or greater)."
        ) from None
    _check_square_footage(sqft)

    try:
        hvac_count = int(hvac_systems)
    except ValueError:
        raise QuoteInputError(
            "Invalid Input", "Please enter a valid number of HVAC systems (0 or greater)."
        ) from None
    _check_hvac_systems(hvac_count)

    return QuoteRequest(
        square_footage=sqft,
        additional_hvac_systems=hvac_count,
        zipcode=_check_zipcode(zipcode),
        add_on_services=tuple(add_on_services),
    )
