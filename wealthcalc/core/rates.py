"""Percent/decimal conversions and rounding shared by the calculators."""

from __future__ import annotations

from typing import Optional

from wealthcalc.models import Compounding

MONEY_PLACES = 2


def to_decimal(percent: Optional[float]) -> Optional[float]:
    if percent is None:
        return None
    return percent / 100.0


def to_percent(rate: Optional[float]) -> Optional[float]:
    if rate is None:
        return None
    return rate * 100.0


def round_money(value: float) -> float:
    return round(value, MONEY_PLACES)


def round_rate(rate: float) -> float:
    """decimal rate -> percent rounded for display (0.0825 -> 8.25)."""
    return round(rate * 100.0, 2)


def is_supplied(value: object) -> bool:
    # 0 is a legitimate rate or amount, so only None counts as missing
    return value is not None


def effective_monthly_rate(annual_rate: float, compounding: Compounding = Compounding.MONTHLY) -> float:
    """
    Monthly rate equivalent to annual_rate compounded at the given frequency.

      monthly / cumulative:  r / 12
      quarterly:             (1 + r/4)^(1/3) - 1
      annually:              (1 + r)^(1/12) - 1
    """
    if compounding == Compounding.QUARTERLY:
        return (1.0 + annual_rate / 4.0) ** (1.0 / 3.0) - 1.0
    if compounding == Compounding.ANNUALLY:
        return (1.0 + annual_rate) ** (1.0 / 12.0) - 1.0
    return annual_rate / 12.0


def periods_per_year(compounding: Compounding) -> int:
    return {
        Compounding.MONTHLY: 12,
        Compounding.QUARTERLY: 4,
        Compounding.ANNUALLY: 1,
        Compounding.CUMULATIVE: 1,
    }[compounding]


def cagr(begin: float, end: float, years: float) -> float:
    if begin <= 0 or end <= 0 or years <= 0:
        return 0.0
    return (end / begin) ** (1.0 / years) - 1.0
