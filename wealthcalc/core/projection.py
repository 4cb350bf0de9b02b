"""
Single-instrument projection: growth, ledger, tax and inflation in one call.

compute_projection is a pure function of (config, tax_context, settings). It
never raises for incomplete input; the returned status says why nothing was
projected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from wealthcalc.core.allocation import is_balanced, resolve_allocation
from wealthcalc.core.evolution import (
    listing_evolution,
    payout_evolution,
    recurring_evolution,
    value_path_evolution,
)
from wealthcalc.core.growth import (
    compound_lump_sum,
    fixed_deposit_value,
    gold_bond_value,
    listing_then_compound,
    payout_scheme_value,
    recurring_contribution_future_value,
    recurring_schedule,
    total_contributed,
)
from wealthcalc.core.inflation import inflation_view
from wealthcalc.core.instruments import (
    SSY_MATURITY_AGE,
    InstrumentSpec,
    get_spec,
    resolve_mode,
)
from wealthcalc.core.rates import cagr, round_money, round_rate, to_decimal
from wealthcalc.core.tax import annual_tax_breakdown, calculate_tax
from wealthcalc.models import (
    AllocationMix,
    AssetReturns,
    Compounding,
    EvolutionRow,
    Frequency,
    GrowthMode,
    InstrumentConfig,
    InstrumentProjection,
    InstrumentType,
    ProjectionResult,
    ProjectionSettings,
    ProjectionStatus,
    TaxContext,
    TaxMethod,
)

logger = logging.getLogger(__name__)


class ProjectionSkipped(ValueError):
    def __init__(self, status: ProjectionStatus, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


@dataclass
class _Computed:
    total_invested: float
    future_value: float
    evolution: List[EvolutionRow]
    rate: float
    details: Dict[str, float] = field(default_factory=dict)
    allocation: Optional[AllocationMix] = None


def _incomplete(message: str) -> ProjectionSkipped:
    return ProjectionSkipped(ProjectionStatus.INCOMPLETE, message)


def resolve_tenure(config: InstrumentConfig, spec: InstrumentSpec) -> float:
    tenure = config.tenureYears
    if tenure is None and spec.instrument == InstrumentType.SSY and config.girlAge is not None:
        tenure = float(SSY_MATURITY_AGE - config.girlAge)
    if tenure is None:
        tenure = spec.fixed_tenure
    if tenure is None or tenure <= 0:
        raise _incomplete("tenure must be greater than zero")
    return tenure


def _require_amount(config: InstrumentConfig) -> float:
    amount = config.contribution.amount
    if amount <= 0:
        raise _incomplete("contribution amount must be greater than zero")
    return amount


def _require_rate(config: InstrumentConfig) -> float:
    if config.rate is None:
        raise _incomplete("an annual rate is required")
    return to_decimal(config.rate)


def _market_rate(config: InstrumentConfig) -> float:
    """Rate the units actually grow at: ETFs net of expenses, REITs with reinvested dividends."""
    rate = _require_rate(config)
    if config.instrument == InstrumentType.ETF and config.expenseRatio is not None:
        rate -= to_decimal(config.expenseRatio)
    if config.instrument == InstrumentType.REITS and config.dividendYield is not None:
        rate += to_decimal(config.dividendYield)
    return rate


def _step_up(config: InstrumentConfig) -> float:
    plan = config.contribution
    return to_decimal(plan.stepUpRate) if plan.stepUpEnabled else 0.0


def _yearly_cap(config: InstrumentConfig, spec: InstrumentSpec) -> Optional[float]:
    caps = [cap for cap in (config.contribution.capPerYear, spec.yearly_cap) if cap is not None]
    return min(caps) if caps else None


def _recurring(
    config: InstrumentConfig,
    spec: InstrumentSpec,
    tenure: float,
    rate: float,
    compounding: Compounding,
) -> _Computed:
    """Shared by RD/PPF/SSY, SIPs and NPS."""
    amount = _require_amount(config)
    frequency = config.contribution.frequency
    if frequency is None or frequency == Frequency.ONCE:
        frequency = spec.frequency if spec.frequency != Frequency.ONCE else Frequency.MONTHLY
    step_up = _step_up(config)
    cap = _yearly_cap(config, spec)
    per_year = 12 if frequency == Frequency.MONTHLY else 1

    steps = list(recurring_schedule(amount, rate, tenure, frequency, compounding, step_up, cap))
    invested = total_contributed(steps)

    cap_binds = cap is not None and amount * per_year > cap
    whole_months = abs(tenure * 12 - len(steps)) < 1e-9
    if frequency == Frequency.MONTHLY and step_up == 0 and not cap_binds and whole_months:
        future_value = recurring_contribution_future_value(amount, rate, len(steps), compounding)
    else:
        future_value = steps[-1].balance

    details: Dict[str, float] = {"periods": float(len(steps))}
    if cap is not None:
        details["yearlyCap"] = cap

    return _Computed(
        total_invested=invested,
        future_value=future_value,
        evolution=recurring_evolution(amount, rate, tenure, frequency, compounding, step_up, cap),
        rate=rate,
        details=details,
    )


def _build_recurring_fixed(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    compounding = config.compounding or spec.compounding
    return _recurring(config, spec, tenure, _require_rate(config), compounding)


def _build_market_sip(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    return _recurring(config, spec, tenure, _market_rate(config), Compounding.MONTHLY)


def _build_lump_sum_fixed(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    principal = _require_amount(config)
    rate = _require_rate(config)
    compounding = config.compounding or spec.compounding

    def value_at(t: float) -> float:
        return fixed_deposit_value(principal, rate, t, compounding)

    return _Computed(
        total_invested=principal,
        future_value=value_at(tenure),
        evolution=value_path_evolution(principal, value_at, tenure),
        rate=rate,
    )


def _build_market_lumpsum(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    principal = _require_amount(config)
    rate = _market_rate(config)

    def value_at(t: float) -> float:
        return compound_lump_sum(principal, rate, t)

    future_value = value_at(tenure)
    details: Dict[str, float] = {}
    if config.instrument == InstrumentType.ETF and config.expenseRatio is not None:
        gross = compound_lump_sum(principal, _require_rate(config), tenure)
        details["expensesPaid"] = round_money(gross - future_value)
    if config.instrument == InstrumentType.REITS and config.dividendYield is not None:
        appreciation_only = compound_lump_sum(principal, _require_rate(config), tenure)
        details["dividendContribution"] = round_money(future_value - appreciation_only)

    return _Computed(
        total_invested=principal,
        future_value=future_value,
        evolution=value_path_evolution(principal, value_at, tenure),
        rate=rate,
        details=details,
    )


def _check_allocation(config: InstrumentConfig) -> AllocationMix:
    if config.allocation is None:
        raise _incomplete("an asset allocation is required")
    if not is_balanced(config.allocation):
        raise ProjectionSkipped(
            ProjectionStatus.NOT_COMPUTABLE,
            f"allocation must total 100% (got {config.allocation.total():.2f}%)",
        )
    return config.allocation


def _build_pension(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    outcome = resolve_allocation(
        _check_allocation(config),
        config.assetReturns or AssetReturns(),
        config.age,
        tenure,
        config.ageBasedCapsOverTime,
    )
    computed = _recurring(config, spec, tenure, outcome.rate, Compounding.MONTHLY)
    computed.allocation = outcome.allocation
    computed.details["weightedReturn"] = round_rate(outcome.rate)
    if outcome.max_equity is not None:
        computed.details["maxEquity"] = float(outcome.max_equity)
    return computed


def _build_payout(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    principal = _require_amount(config)
    rate = _require_rate(config)
    payout = payout_scheme_value(
        principal, rate, tenure, spec.payouts_per_year, to_decimal(spec.minimum_rate)
    )
    if payout is None:
        raise _incomplete(f"rate must be at least {spec.minimum_rate}%")
    return _Computed(
        total_invested=principal,
        future_value=payout.maturity_value,
        evolution=payout_evolution(principal, rate, tenure, payout.payouts_per_year),
        rate=rate,
        details={
            "periodInterest": round_money(payout.period_interest),
            "yearlyInterest": round_money(payout.period_interest * payout.payouts_per_year),
            "totalInterest": round_money(payout.total_interest),
            "payoutsPerYear": float(payout.payouts_per_year),
        },
    )


def _build_gold_bond(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    principal = _require_amount(config)
    appreciation = _require_rate(config)
    fixed_rate = to_decimal(config.goldFixedRate)

    def value_at(t: float) -> float:
        return gold_bond_value(principal, appreciation, t, fixed_rate).maturity_value

    value = gold_bond_value(principal, appreciation, tenure, fixed_rate)
    return _Computed(
        total_invested=principal,
        future_value=value.maturity_value,
        evolution=value_path_evolution(principal, value_at, tenure),
        rate=cagr(principal, value.maturity_value, tenure),
        details={
            "goldValue": round_money(value.gold_value),
            "couponInterest": round_money(value.coupon_interest),
        },
    )


def _listing_value(config: InstrumentConfig, investment: float) -> float:
    if config.issuePrice is not None and config.listingPrice is not None:
        return investment * config.listingPrice / config.issuePrice
    if config.listingGain is not None:
        return investment * (1.0 + to_decimal(config.listingGain))
    return investment


def _build_listing(config: InstrumentConfig, spec: InstrumentSpec, tenure: float) -> _Computed:
    investment = _require_amount(config)
    rate = _require_rate(config)
    listing_value = _listing_value(config, investment)
    if listing_value <= 0:
        raise _incomplete("listing value must be greater than zero")
    future_value = listing_then_compound(listing_value, rate, tenure)
    return _Computed(
        total_invested=investment,
        future_value=future_value,
        evolution=listing_evolution(investment, listing_value, rate, tenure),
        rate=rate,
        details={
            "listingValue": round_money(listing_value),
            "listingGain": round_money(listing_value - investment),
            "overallCagr": round_rate(cagr(investment, future_value, tenure)),
        },
    )


_BUILDERS: Dict[GrowthMode, Callable[[InstrumentConfig, InstrumentSpec, float], _Computed]] = {
    GrowthMode.RECURRING_FIXED_SCHEME: _build_recurring_fixed,
    GrowthMode.LUMP_SUM_FIXED_SCHEME: _build_lump_sum_fixed,
    GrowthMode.MARKET_LINKED_SIP: _build_market_sip,
    GrowthMode.MARKET_LINKED_LUMPSUM: _build_market_lumpsum,
    GrowthMode.PENSION_SCHEME: _build_pension,
    GrowthMode.PAYOUT_SCHEME: _build_payout,
    GrowthMode.GOVERNMENT_BOND_HYBRID: _build_gold_bond,
    GrowthMode.LISTING_EVENT: _build_listing,
}


def compute_projection(
    config: InstrumentConfig,
    tax_context: Optional[TaxContext] = None,
    settings: Optional[ProjectionSettings] = None,
) -> InstrumentProjection:
    """
    Project one instrument.

    Order of operations:
      1) resolve growth mode and tenure (SSY from the girl's age, fixed-tenure schemes)
      2) compute invested amount, future value and the year-by-year ledger
      3) tax the gain with the instrument's rule
      4) deflate to today's money when settings.adjustInflation is set
    """
    tax_context = tax_context or TaxContext()
    settings = settings or ProjectionSettings()

    spec = get_spec(config.instrument)
    mode = resolve_mode(spec, config.contribution)

    try:
        if mode == GrowthMode.PENSION_SCHEME:
            # a bad mix is reported even when other inputs are still missing
            _check_allocation(config)
        tenure = resolve_tenure(config, spec)
        computed = _BUILDERS[mode](config, spec, tenure)
    except ProjectionSkipped as skipped:
        if skipped.status == ProjectionStatus.NOT_COMPUTABLE:
            logger.warning("%s not computable: %s", config.instrument.value, skipped.message)
        else:
            logger.debug("%s incomplete: %s", config.instrument.value, skipped.message)
        return InstrumentProjection(
            instrument=config.instrument,
            label=config.label,
            status=skipped.status,
            message=skipped.message,
            growthMode=mode,
        )

    invested = round_money(computed.total_invested)
    future_value = round_money(computed.future_value)
    returns = round_money(future_value - invested)
    projection = ProjectionResult(
        totalInvested=invested,
        returnsEarned=returns,
        futureValue=future_value,
        evolution=computed.evolution,
    )

    tax = calculate_tax(
        future_value,
        config.instrument,
        tenure,
        tax_context.model_copy(update={"principal": invested, "returns": returns}),
        etf_kind=config.etfKind,
        inflation_rate=to_decimal(settings.inflationRate),
        purchase_year=config.purchaseYear,
        senior_citizen=config.seniorCitizen,
    )

    inflation = None
    if settings.adjustInflation:
        inflation = inflation_view(
            future_value,
            invested,
            computed.rate,
            to_decimal(settings.inflationRate),
            tenure,
            post_tax_value=tax.postTaxCorpus,
        )

    annual_tax = []
    if settings.taxMethod in (TaxMethod.ACCUMULATION, TaxMethod.BOTH):
        annual_tax = annual_tax_breakdown(
            config.instrument, computed.evolution, tax_context.incomeTaxSlab, config.etfKind
        )

    logger.debug(
        "%s projected over %.2f years: invested=%.2f future=%.2f tax=%.2f",
        config.instrument.value,
        tenure,
        invested,
        future_value,
        tax.taxAmount,
    )

    return InstrumentProjection(
        instrument=config.instrument,
        label=config.label,
        status=ProjectionStatus.COMPUTED,
        growthMode=mode,
        tenureYears=tenure,
        effectiveRate=round_rate(computed.rate),
        projection=projection,
        tax=tax,
        inflation=inflation,
        allocation=computed.allocation,
        annualTax=annual_tax,
        details=computed.details,
    )


__all__ = [
    "ProjectionSkipped",
    "compute_projection",
    "resolve_tenure",
]
