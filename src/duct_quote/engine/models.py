"""
Data models for the quote engine.

Uses frozen dataclasses so a pricing snapshot can be shared between
calculations without any of them changing it.
"""
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


def _number(value: float) -> str:
    """Render 1000.0 as '1000' and 999.5 as '999.5'."""
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


@dataclass(frozen=True)
class PriceTier:
    """An inclusive [min, max] range with a flat price."""
    min: float
    max: float
    price: float

    @property
    def unbounded(self) -> bool:
        return math.isinf(self.max)

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @property
    def label(self) -> str:
        """Human-readable range, e.g. '1000-1999 sqft' or '10000+ sqft'."""
        if self.unbounded:
            return f"{_number(self.min)}+ sqft"
        return f"{_number(self.min)}-{_number(self.max)} sqft"


@dataclass(frozen=True)
class AddOnService:
    """An optional line item offered next to the main quote."""
    service_name: str
    price: float
    description: str = ""
    hidden: bool = False


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class PricingConfig:
    """Immutable pricing snapshot consumed by the engine."""
    sqft_tiers: tuple[PriceTier, ...]
    clean_and_seal_tiers: tuple[PriceTier, ...]
    clean_and_seal_per_unit: float
    per_additional_hvac_charge: float
    partner_discount_percent: float
    zipcode_charges: Mapping[str, float] = field(default_factory=dict)
    add_on_services: Mapping[str, AddOnService] = field(default_factory=dict)
    version: Optional[str] = None

    def __post_init__(self):
        # Accept lists/dicts from callers but store read-only views
        object.__setattr__(self, 'sqft_tiers', tuple(self.sqft_tiers))
        object.__setattr__(self, 'clean_and_seal_tiers', tuple(self.clean_and_seal_tiers))
        object.__setattr__(self, 'zipcode_charges', _freeze(self.zipcode_charges))
        object.__setattr__(self, 'add_on_services', _freeze(self.add_on_services))

    def __hash__(self):
        return hash((self.sqft_tiers, self.clean_and_seal_tiers, self.version))

    def visible_add_ons(self) -> list[AddOnService]:
        """Add-on services that are not hidden, sorted by key."""
        return [
            self.add_on_services[key]
            for key in sorted(self.add_on_services)
            if not self.add_on_services[key].hidden
        ]


@dataclass(frozen=True)
class QuoteRequest:
    """Per-calculation input, already validated by the caller."""
    square_footage: float
    additional_hvac_systems: int
    zipcode: str
    add_on_services: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'add_on_services', tuple(self.add_on_services))

    @property
    def total_hvac_systems(self) -> int:
        # The first system is bundled into the square-footage price
        return self.additional_hvac_systems + 1


@dataclass(frozen=True)
class TraceStep:
    """A single step in the quote resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class AddOnLine:
    """A priced add-on service on a quote."""
    service_name: str
    description: str
    price: float


@dataclass(frozen=True)
class QuoteBreakdown:
    """Itemized result of a quote calculation."""
    sqft_charge: float
    hvac_charge: float
    zipcode_charge: float
    subtotal: float
    discount: float
    total: float
    clean_and_seal_price: float
    clean_and_seal_discount: float
    clean_and_seal_total: float
    sqft_tier_label: str = ""
    add_ons: tuple[AddOnLine, ...] = ()
    add_on_total: float = 0.0
    warnings: tuple[str, ...] = ()
    trace: tuple[TraceStep, ...] = ()

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_payload_dict(self) -> dict:
        """Convert to the camelCase shape used by the API and job payloads."""
        return {
            "sqftCharge": self.sqft_charge,
            "hvacCharge": self.hvac_charge,
            "zipcodeCharge": self.zipcode_charge,
            "subtotal": self.subtotal,
            "discount": self.discount,
            "total": self.total,
            "cleanAndSealPrice": self.clean_and_seal_price,
            "cleanAndSealDiscount": self.clean_and_seal_discount,
            "cleanAndSealTotal": self.clean_and_seal_total,
            "sqftTier": self.sqft_tier_label,
            "addOns": [
                {
                    "serviceName": line.service_name,
                    "description": line.description,
                    "price": line.price,
                }
                for line in self.add_ons
            ],
            "addOnTotal": self.add_on_total,
            "warnings": list(self.warnings),
        }
