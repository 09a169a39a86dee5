"""
Tier lookup - maps a value onto a {min, max, price} range table.

Used for both the square-footage table and the Clean & Seal table.
"""
import math
from typing import Optional, Sequence

from .models import PriceTier


def find_tier(tiers: Sequence[PriceTier], value: float) -> Optional[PriceTier]:
    """Return the first tier whose inclusive range contains value."""
    for tier in tiers:
        if tier.contains(value):
            return tier
    return None


def tier_price(tiers: Sequence[PriceTier], value: float) -> tuple[float, PriceTier, bool]:
    """
    Resolve the price for value.

    Returns (price, tier, fell_back). When no tier matches, the last tier
    of the table is used and fell_back is True.
    """
    tier = find_tier(tiers, value)
    if tier is not None:
        return tier.price, tier, False
    last = tiers[-1]
    return last.price, last, True


def validate_tiers(tiers: Sequence[PriceTier], name: str = "tiers") -> None:
    """
    Check that a tier table covers [0, inf) in order.

    Adjacent tiers may meet on an integer seam (0-999 then 1000-1999).
    Raises ValueError listing every problem found.
    """
    errors = []

    if not tiers:
        raise ValueError(f"{name}: table is empty")

    if tiers[0].min != 0:
        errors.append(f"{name}: first tier starts at {tiers[0].min}, expected 0")

    for i, tier in enumerate(tiers):
        if tier.max < tier.min:
            errors.append(f"{name}: tier {i} has max {tier.max} below min {tier.min}")
        if tier.price < 0:
            errors.append(f"{name}: tier {i} has negative price {tier.price}")

    for i, (prev, curr) in enumerate(zip(tiers, tiers[1:]), start=1):
        if curr.min <= prev.max:
            errors.append(f"{name}: tier {i} overlaps tier {i - 1}")
        elif curr.min > prev.max + 1:
            errors.append(f"{name}: gap between {prev.max} and {curr.min}")

    if not math.isinf(tiers[-1].max):
        errors.append(f"{name}: last tier must be unbounded")

    if errors:
        raise ValueError("; ".join(errors))
