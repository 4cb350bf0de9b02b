"""
Year-by-year ledgers that reconcile with the growth calculators.

Every builder produces raw (period, label, contribution, closing) entries from
the same math the calculators use; `_ledger` then rounds them so that each row
satisfies closing = opening + contribution + growth, with opening equal to the
previous row's closing. Growth is the rounded residual, so the growth column
sums to the total returns.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence, Tuple

from wealthcalc.core.growth import listing_then_compound, recurring_schedule
from wealthcalc.core.rates import round_money
from wealthcalc.models import Compounding, EvolutionRow, Frequency

RawEntry = Tuple[int, str, float, float]

_EPSILON = 1e-9


def year_checkpoints(years: float) -> List[float]:
    """[1, 2, ..., floor(years)] plus the fractional tail, if any."""
    if years <= 0:
        return []
    whole = int(math.floor(years + _EPSILON))
    points = [float(t) for t in range(1, whole + 1)]
    if years - whole > _EPSILON:
        points.append(years)
    return points


def _label(t: float) -> str:
    if float(t).is_integer():
        return f"Year {int(t)}"
    return f"Year {t:g}"


def _ledger(entries: Sequence[RawEntry], opening: float = 0.0) -> List[EvolutionRow]:
    rows: List[EvolutionRow] = []
    opening = round_money(opening)
    for period, label, contribution, closing in entries:
        contribution = round_money(contribution)
        closing = round_money(closing)
        growth = round_money(closing - opening - contribution)
        rows.append(
            EvolutionRow(
                period=period,
                label=label,
                openingBalance=opening,
                contribution=contribution,
                growth=growth,
                closingBalance=closing,
            )
        )
        opening = closing
    return rows


def value_path_evolution(
    principal: float,
    value_at: Callable[[float], float],
    years: float,
) -> List[EvolutionRow]:
    """Single deposit at the start, value_at(t) gives the balance after t years."""
    entries: List[RawEntry] = []
    for period, t in enumerate(year_checkpoints(years), start=1):
        contribution = principal if period == 1 else 0.0
        entries.append((period, _label(t), contribution, value_at(t)))
    return _ledger(entries)


def recurring_evolution(
    base_contribution: float,
    annual_rate: float,
    years: float,
    frequency: Frequency = Frequency.MONTHLY,
    compounding: Compounding = Compounding.MONTHLY,
    step_up_rate: float = 0.0,
    yearly_cap: Optional[float] = None,
) -> List[EvolutionRow]:
    """Groups the period-by-period schedule into one row per (possibly partial) year."""
    entries: List[RawEntry] = []
    year_index = -1
    contributed = 0.0
    balance = 0.0
    elapsed = 0.0

    def flush() -> None:
        if year_index < 0:
            return
        whole = abs(elapsed - (year_index + 1)) <= _EPSILON
        label = _label(year_index + 1) if whole else _label(round(elapsed, 4))
        entries.append((year_index + 1, label, contributed, balance))

    for step in recurring_schedule(
        base_contribution, annual_rate, years, frequency, compounding, step_up_rate, yearly_cap
    ):
        if step.year_index != year_index:
            flush()
            year_index = step.year_index
            contributed = 0.0
        contributed += step.contribution
        balance = step.balance
        elapsed = step.elapsed
    flush()

    return _ledger(entries)


def payout_evolution(
    principal: float,
    annual_rate: float,
    years: float,
    payouts_per_year: int,
) -> List[EvolutionRow]:
    """
    Payout schemes never compound: the interest base stays at `principal`.
    The closing column carries principal + interest paid out so far, so the
    last row matches the scheme's maturity value.
    """
    period_interest = principal * annual_rate / payouts_per_year
    yearly_interest = period_interest * payouts_per_year
    entries: List[RawEntry] = []
    for period, t in enumerate(year_checkpoints(years), start=1):
        contribution = principal if period == 1 else 0.0
        entries.append((period, _label(t), contribution, principal + yearly_interest * t))
    return _ledger(entries)


def listing_evolution(
    initial_investment: float,
    listing_value: float,
    annual_rate: float,
    years: float,
) -> List[EvolutionRow]:
    """Period 0 books the listing gain; later rows compound the listing value."""
    entries: List[RawEntry] = [(0, "Listing", initial_investment, listing_value)]
    for period, t in enumerate(year_checkpoints(years), start=1):
        entries.append((period, _label(t), 0.0, listing_then_compound(listing_value, annual_rate, t)))
    return _ledger(entries)


__all__ = [
    "listing_evolution",
    "payout_evolution",
    "recurring_evolution",
    "value_path_evolution",
    "year_checkpoints",
]
