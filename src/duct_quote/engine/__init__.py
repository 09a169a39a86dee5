"""Engine subpackage - quote calculation and its value types."""
from .pricing_engine import (
    PricingEngine,
    compute_quote,
    compute_zipcode_charge,
    get_clean_and_seal_price,
    get_sqft_charge,
    normalize_zipcode,
)
from .models import AddOnService, PriceTier, PricingConfig, QuoteBreakdown, QuoteRequest
from .validation import QuoteInputError, parse_quote_form, validate_quote_request

__all__ = [
    'PricingEngine', 'compute_quote', 'compute_zipcode_charge', 'get_clean_and_seal_price',
    'get_sqft_charge', 'normalize_zipcode', 'AddOnService', 'PriceTier', 'PricingConfig',
    'QuoteBreakdown', 'QuoteRequest', 'QuoteInputError', 'parse_quote_form',
    'validate_quote_request',
]
