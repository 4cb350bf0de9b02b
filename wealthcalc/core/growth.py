"""
Growth calculators shared by every instrument.

All rates here are decimals (0.08 for 8%); years may be fractional.
Contributions are made at the START of each period (annuity-due) and the
period's growth is applied afterwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional

from wealthcalc.core.rates import effective_monthly_rate, periods_per_year
from wealthcalc.models import Compounding, Frequency


_EPSILON = 1e-9


@dataclass(frozen=True)
class PeriodStep:
    index: int
    year_index: int
    contribution: float
    balance: float
    elapsed: float


@dataclass(frozen=True)
class PayoutValue:
    period_interest: float
    total_interest: float
    maturity_value: float
    payouts_per_year: int


@dataclass(frozen=True)
class GoldBondValue:
    gold_value: float
    coupon_interest: float
    maturity_value: float


def compound_lump_sum(
    principal: float,
    annual_rate: Optional[float],
    years: float,
    periods_per_year: int = 1,
) -> float:
    """P * (1 + r/n)^(n*t); 0 for a non-positive principal or tenure, or a missing rate."""
    if annual_rate is None or principal <= 0 or years <= 0:
        return 0.0
    return principal * (1.0 + annual_rate / periods_per_year) ** (periods_per_year * years)


def fixed_deposit_value(
    principal: float,
    annual_rate: Optional[float],
    years: float,
    compounding: Compounding = Compounding.QUARTERLY,
) -> float:
    """Cumulative deposits earn simple interest under a year, annual compounding after."""
    if annual_rate is None or principal <= 0 or years <= 0:
        return 0.0
    if compounding == Compounding.CUMULATIVE and years < 1:
        return principal * (1.0 + annual_rate * years)
    return compound_lump_sum(principal, annual_rate, years, periods_per_year(compounding))


def recurring_contribution_future_value(
    contribution: float,
    annual_rate: Optional[float],
    total_months: int,
    compounding: Compounding = Compounding.MONTHLY,
) -> float:
    """
    Future value of a fixed monthly contribution paid at the start of every month:

        FV = P * ((1 + r)^n - 1) / r * (1 + r)

    r is the monthly rate implied by annual_rate under `compounding`.
    A zero rate degenerates to P * n.
    """
    if annual_rate is None or contribution <= 0 or total_months <= 0:
        return 0.0
    monthly_rate = effective_monthly_rate(annual_rate, compounding)
    if monthly_rate == 0:
        return contribution * total_months
    growth = (1.0 + monthly_rate) ** total_months
    return contribution * ((growth - 1.0) / monthly_rate) * (1.0 + monthly_rate)


def _contribution_for_year(
    base_contribution: float,
    per_year: int,
    year_index: int,
    step_up_rate: float,
    yearly_cap: Optional[float],
) -> float:
    yearly = base_contribution * per_year * (1.0 + step_up_rate) ** year_index
    if yearly_cap is not None:
        yearly = min(yearly, yearly_cap)
    return yearly / per_year


def _period_rate(annual_rate: float, frequency: Frequency, compounding: Compounding) -> float:
    if frequency == Frequency.MONTHLY:
        return effective_monthly_rate(annual_rate, compounding)
    if compounding in (Compounding.ANNUALLY, Compounding.CUMULATIVE):
        return annual_rate
    n = periods_per_year(compounding)
    return (1.0 + annual_rate / n) ** n - 1.0


def recurring_schedule(
    base_contribution: float,
    annual_rate: float,
    years: float,
    frequency: Frequency = Frequency.MONTHLY,
    compounding: Compounding = Compounding.MONTHLY,
    step_up_rate: float = 0.0,
    yearly_cap: Optional[float] = None,
) -> Iterator[PeriodStep]:
    """
    Period-by-period balance of a recurring plan.

    Each year's contribution is recomputed from the base amount and the step-up
    rate, then capped at yearly_cap (the cap applies again every year).

    A fractional tenure still gets a contribution at the start of its last,
    shorter period; that period grows only for the remaining fraction
    (3.5 yearly -> deposits at t = 0, 1, 2, 3 and half a year of growth on the last).
    """
    if years <= 0:
        return
    per_year = 12 if frequency == Frequency.MONTHLY else 1
    span = years * per_year
    total_periods = int(math.ceil(span - _EPSILON))
    rate = _period_rate(annual_rate, frequency, compounding)

    balance = 0.0
    contribution = 0.0
    current_year = -1
    for index in range(total_periods):
        year_index = index // per_year
        if year_index != current_year:
            contribution = _contribution_for_year(
                base_contribution, per_year, year_index, step_up_rate, yearly_cap
            )
            current_year = year_index
        fraction = min(1.0, span - index)
        if fraction > 1.0 - _EPSILON:
            fraction = 1.0
        # 1) contribution at the start of the period, 2) then growth
        balance = (balance + contribution) * (1.0 + rate) ** fraction
        yield PeriodStep(
            index=index,
            year_index=year_index,
            contribution=contribution,
            balance=balance,
            elapsed=min((index + 1) / per_year, years),
        )


def step_up_recurring_future_value(
    base_contribution: float,
    step_up_rate: float,
    years: float,
    annual_rate: Optional[float],
    yearly_cap: Optional[float] = None,
    frequency: Frequency = Frequency.MONTHLY,
    compounding: Compounding = Compounding.MONTHLY,
) -> float:
    if annual_rate is None or base_contribution <= 0 or years <= 0:
        return 0.0
    balance = 0.0
    for step in recurring_schedule(
        base_contribution, annual_rate, years, frequency, compounding, step_up_rate, yearly_cap
    ):
        balance = step.balance
    return balance


def total_contributed(steps: List[PeriodStep]) -> float:
    return sum(step.contribution for step in steps)


def payout_scheme_value(
    principal: float,
    annual_rate: Optional[float],
    years: float,
    payouts_per_year: int,
    minimum_rate: float = 0.0,
) -> Optional[PayoutValue]:
    """
    Interest paid out every period on a principal that never grows.

    period interest = P * r / payouts_per_year
    total interest  = period interest * payouts_per_year * years
    maturity        = P + total interest
    """
    if annual_rate is None or annual_rate < minimum_rate:
        return None
    if principal <= 0 or years <= 0:
        return None
    period_interest = principal * annual_rate / payouts_per_year
    total_interest = period_interest * payouts_per_year * years
    return PayoutValue(
        period_interest=period_interest,
        total_interest=total_interest,
        maturity_value=principal + total_interest,
        payouts_per_year=payouts_per_year,
    )


def quarterly_payout_scheme_value(
    principal: float,
    annual_rate: Optional[float],
    years: float,
    minimum_rate: float = 0.0,
) -> Optional[PayoutValue]:
    return payout_scheme_value(principal, annual_rate, years, 4, minimum_rate)


def gold_bond_value(
    principal: float,
    appreciation_rate: Optional[float],
    years: float,
    fixed_rate: float = 0.025,
) -> GoldBondValue:
    """Gold price appreciation plus the fixed coupon compounded semi-annually:
    P(1+g)^t + P((1 + f/2)^(2t) - 1)."""
    if appreciation_rate is None or principal <= 0 or years <= 0:
        return GoldBondValue(gold_value=0.0, coupon_interest=0.0, maturity_value=0.0)
    gold_value = principal * (1.0 + appreciation_rate) ** years
    coupon_interest = principal * ((1.0 + fixed_rate / 2.0) ** (2.0 * years) - 1.0)
    return GoldBondValue(
        gold_value=gold_value,
        coupon_interest=coupon_interest,
        maturity_value=gold_value + coupon_interest,
    )


def listing_then_compound(listing_value: float, annual_rate: Optional[float], years: float) -> float:
    if listing_value <= 0 or annual_rate is None:
        return 0.0
    if years <= 0:
        return listing_value
    return compound_lump_sum(listing_value, annual_rate, years)


__all__ = [
    "GoldBondValue",
    "PayoutValue",
    "PeriodStep",
    "compound_lump_sum",
    "fixed_deposit_value",
    "gold_bond_value",
    "listing_then_compound",
    "payout_scheme_value",
    "quarterly_payout_scheme_value",
    "recurring_contribution_future_value",
    "recurring_schedule",
    "step_up_recurring_future_value",
    "total_contributed",
]
