"""Inflation adjustments: today's-money values, real rates and purchasing power."""

from __future__ import annotations

from typing import Dict, List, Optional

from wealthcalc.core.rates import round_money, round_rate, to_decimal
from wealthcalc.models import CategoryPower, InflationView


def real_value(nominal: float, inflation_rate: float, years: float) -> float:
    """nominal / (1 + i)^years; inflation_rate is a decimal."""
    if years <= 0:
        return nominal
    return nominal / (1.0 + inflation_rate) ** years


def real_rate(nominal_rate: float, inflation_rate: float) -> float:
    return (1.0 + nominal_rate) / (1.0 + inflation_rate) - 1.0


def future_price(current_price: float, inflation_rate: float, years: float) -> float:
    if years <= 0:
        return current_price
    return current_price * (1.0 + inflation_rate) ** years


def inflation_view(
    future_value: float,
    total_invested: float,
    nominal_rate: float,
    inflation_rate: float,
    years: float,
    post_tax_value: Optional[float] = None,
) -> InflationView:
    """
    Real figures for one projection. real returns compare the deflated future
    value against the (undeflated) amount invested, as a saver would.
    """
    real_fv = real_value(future_value, inflation_rate, years)
    real_post_tax = None
    if post_tax_value is not None:
        real_post_tax = round_money(real_value(post_tax_value, inflation_rate, years))
    return InflationView(
        realFutureValue=round_money(real_fv),
        realReturns=round_money(real_fv - total_invested),
        realRate=round_rate(real_rate(nominal_rate, inflation_rate)),
        realPostTaxValue=real_post_tax,
    )


def purchasing_power(
    corpus: float,
    years: float,
    category_rates: Dict[str, float],
) -> List[CategoryPower]:
    """What `corpus` is worth in today's money for each spending category (rates in percent)."""
    rows: List[CategoryPower] = []
    for category, rate in category_rates.items():
        rows.append(
            CategoryPower(
                category=category,
                inflationRate=rate,
                realValue=round_money(real_value(corpus, to_decimal(rate), years)),
            )
        )
    return rows


__all__ = [
    "future_price",
    "inflation_view",
    "purchasing_power",
    "real_rate",
    "real_value",
]
