"""Asset allocation for pension plans: age-based equity caps and blended returns."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from wealthcalc.models import AllocationMix, AssetReturns

ALLOCATION_TOLERANCE = 0.01


@dataclass(frozen=True)
class AllocationOutcome:
    allocation: AllocationMix
    rate: float
    max_equity: Optional[int]


def max_equity_for_age(age: int) -> int:
    """
    Equity ceiling in percent:
      age <= 35       -> 100
      35 < age <= 50  -> max(75, 100 - (age - 35) * 2.5)
      age > 50        -> max(50, 75 - (age - 50) * 2.5)
    rounded up to a whole percent.
    """
    if age <= 35:
        cap = 100.0
    elif age <= 50:
        cap = max(75.0, 100.0 - (age - 35) * 2.5)
    else:
        cap = max(50.0, 75.0 - (age - 50) * 2.5)
    return int(math.ceil(cap))


def is_balanced(mix: AllocationMix) -> bool:
    return abs(mix.total() - 100.0) <= ALLOCATION_TOLERANCE


def apply_equity_cap(mix: AllocationMix, age: int) -> AllocationMix:
    """Clamp equity to the age cap and spread the excess over the other classes
    by their relative weight (all to government bonds when they are all zero)."""
    cap = max_equity_for_age(age)
    if mix.equity <= cap:
        return mix.model_copy()

    excess = mix.equity - cap
    others = mix.corporateBonds + mix.governmentBonds + mix.alternative
    if others <= 0:
        return AllocationMix(
            equity=cap,
            corporateBonds=mix.corporateBonds,
            governmentBonds=mix.governmentBonds + excess,
            alternative=mix.alternative,
        )

    return AllocationMix(
        equity=cap,
        corporateBonds=mix.corporateBonds + excess * mix.corporateBonds / others,
        governmentBonds=mix.governmentBonds + excess * mix.governmentBonds / others,
        alternative=mix.alternative + excess * mix.alternative / others,
    )


def weighted_return(mix: AllocationMix, returns: AssetReturns) -> float:
    """Blended annual return as a decimal."""
    blended = (
        mix.equity * returns.equity
        + mix.corporateBonds * returns.corporateBonds
        + mix.governmentBonds * returns.governmentBonds
        + mix.alternative * returns.alternative
    )
    return blended / 10000.0


def average_weighted_return(mix: AllocationMix, returns: AssetReturns, age: int, years: float) -> float:
    """
    Mean of the yearly blended returns when the cap is re-applied with age + year.
    The capped allocation carries into the following year. This is an arithmetic
    mean of rates, not a year-by-year compounding of the changing mix.
    """
    count = max(1, int(math.ceil(years)))
    current = mix
    total = 0.0
    for year in range(count):
        current = apply_equity_cap(current, age + year)
        total += weighted_return(current, returns)
    return total / count


def resolve_allocation(
    mix: AllocationMix,
    returns: AssetReturns,
    age: Optional[int],
    years: float,
    over_time: bool = False,
) -> AllocationOutcome:
    if age is None:
        return AllocationOutcome(allocation=mix.model_copy(), rate=weighted_return(mix, returns), max_equity=None)

    effective = apply_equity_cap(mix, age)
    if over_time:
        rate = average_weighted_return(mix, returns, age, years)
    else:
        rate = weighted_return(effective, returns)
    return AllocationOutcome(allocation=effective, rate=rate, max_equity=max_equity_for_age(age))


__all__ = [
    "ALLOCATION_TOLERANCE",
    "AllocationOutcome",
    "apply_equity_cap",
    "average_weighted_return",
    "is_balanced",
    "max_equity_for_age",
    "resolve_allocation",
    "weighted_return",
]
