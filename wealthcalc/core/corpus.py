"""
Multi-instrument corpus: runs compute_projection per instrument, folds in
existing holdings and sums everything into one nominal / post-tax / real view.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from wealthcalc.core.growth import compound_lump_sum
from wealthcalc.core.inflation import purchasing_power, real_value
from wealthcalc.core.instruments import get_spec
from wealthcalc.core.projection import ProjectionSkipped, compute_projection, resolve_tenure
from wealthcalc.core.rates import round_money, to_decimal
from wealthcalc.core.tax import calculate_tax
from wealthcalc.models import (
    CorpusEntry,
    CorpusTotals,
    InstrumentConfig,
    InstrumentProjection,
    ProjectionSettings,
    ProjectionStatus,
    TaxContext,
)

logger = logging.getLogger(__name__)


def effective_tenure(config: InstrumentConfig, horizon: Optional[float]) -> Optional[float]:
    """Tenure capped at the corpus horizon; None when the instrument has no usable tenure."""
    try:
        tenure = resolve_tenure(config, get_spec(config.instrument))
    except ProjectionSkipped:
        return None
    if horizon is not None:
        return min(tenure, horizon)
    return tenure


def _existing_future_value(
    config: InstrumentConfig,
    projection: Optional[InstrumentProjection],
    tenure: Optional[float],
    horizon: Optional[float],
) -> tuple[float, float]:
    """
    (future value, years held) of what is already invested.

    Planning to invest more: the holding rides along with the new money at the
    instrument's rate for min(tenure, horizon - yearsInvested) years.
    Otherwise it grows at its own expected rate until the horizon.
    """
    existing = config.existing
    if existing is None or existing.currentValue <= 0:
        return 0.0, 0.0

    computed = projection is not None and projection.status == ProjectionStatus.COMPUTED
    remaining = None if horizon is None else max(0.0, horizon - existing.yearsInvested)

    if config.planToInvestMore and computed and tenure:
        years = tenure if remaining is None else min(tenure, remaining)
        rate = projection.effectiveRate
    else:
        years = remaining if remaining is not None else (tenure or 0.0)
        rate = existing.expectedReturnRate
        if rate is None:
            rate = projection.effectiveRate if computed else config.rate

    if years <= 0 or rate is None:
        return existing.currentValue, max(years, 0.0)
    return compound_lump_sum(existing.currentValue, to_decimal(rate), years), years


def project_entry(
    config: InstrumentConfig,
    tax_context: TaxContext,
    settings: ProjectionSettings,
) -> CorpusEntry:
    horizon = settings.timeHorizon
    tenure = effective_tenure(config, horizon)

    projection: Optional[InstrumentProjection] = None
    if config.planToInvestMore:
        capped = config
        if tenure is not None:
            capped = config.model_copy(update={"tenureYears": tenure})
        projection = compute_projection(capped, tax_context, settings)
        if projection.status == ProjectionStatus.NOT_COMPUTABLE:
            return CorpusEntry(
                instrument=config.instrument,
                label=config.label,
                status=projection.status,
                message=projection.message,
            )

    existing_value = config.existing.currentValue if config.existing is not None else 0.0
    existing_future, existing_years = _existing_future_value(config, projection, tenure, horizon)

    invested = 0.0
    future_value = 0.0
    effective_rate = None
    if projection is not None and projection.status == ProjectionStatus.COMPUTED:
        invested = projection.projection.totalInvested
        future_value = projection.projection.futureValue
        effective_rate = projection.effectiveRate

    if invested <= 0 and existing_value <= 0:
        message = projection.message if projection is not None else "nothing invested or planned"
        return CorpusEntry(
            instrument=config.instrument,
            label=config.label,
            status=ProjectionStatus.INCOMPLETE,
            message=message,
        )

    maturity = round_money(future_value + existing_future)
    returns = round_money((future_value - invested) + (existing_future - existing_value))
    holding = max(tenure or 0.0, existing_years)
    tax = calculate_tax(
        maturity,
        config.instrument,
        holding,
        tax_context.model_copy(update={"principal": invested + existing_value, "returns": returns}),
        etf_kind=config.etfKind,
        inflation_rate=to_decimal(settings.inflationRate),
        purchase_year=config.purchaseYear,
        senior_citizen=config.seniorCitizen,
    )

    return CorpusEntry(
        instrument=config.instrument,
        label=config.label,
        status=ProjectionStatus.COMPUTED,
        tenureYears=holding,
        investedAmount=round_money(invested),
        existingValue=round_money(existing_value),
        existingFutureValue=round_money(existing_future),
        returns=returns,
        maturityValue=maturity,
        taxAmount=tax.taxAmount,
        postTaxValue=tax.postTaxCorpus,
        effectiveRate=effective_rate,
    )


def aggregate_corpus(
    configs: Sequence[InstrumentConfig],
    tax_context: Optional[TaxContext] = None,
    settings: Optional[ProjectionSettings] = None,
) -> CorpusTotals:
    """
    Sum every computable instrument into one corpus.

    Incomplete and not-computable instruments are listed with their status and
    left out of the totals; an arithmetic failure in one instrument is logged
    and does not stop the others.
    """
    tax_context = tax_context or TaxContext()
    settings = settings or ProjectionSettings()

    entries: List[CorpusEntry] = []
    for config in configs:
        try:
            entry = project_entry(config, tax_context, settings)
        except (ArithmeticError, ValueError) as exc:
            logger.exception("corpus projection failed for %s", config.instrument.value)
            entry = CorpusEntry(
                instrument=config.instrument,
                label=config.label,
                status=ProjectionStatus.FAILED,
                message=str(exc),
            )
        entries.append(entry)

    computed = [entry for entry in entries if entry.status == ProjectionStatus.COMPUTED]
    nominal = round_money(sum(entry.maturityValue for entry in computed))
    post_tax = round_money(sum(entry.postTaxValue for entry in computed))

    # 1) percentage shares over the computed entries only
    for entry in computed:
        entry.percentage = round(entry.maturityValue / nominal * 100.0, 2) if nominal > 0 else 0.0
    if nominal > 0 and computed:
        # rounding residual goes to the largest share so the shares total exactly 100
        largest = max(computed, key=lambda entry: entry.maturityValue)
        residual = 100.0 - sum(entry.percentage for entry in computed)
        largest.percentage = round(largest.percentage + residual, 2)

    totals = CorpusTotals(
        totalInvested=round_money(sum(entry.investedAmount for entry in computed)),
        totalExistingValue=round_money(sum(entry.existingValue for entry in computed)),
        totalReturns=round_money(sum(entry.returns for entry in computed)),
        nominalCorpus=nominal,
        totalTax=round_money(sum(entry.taxAmount for entry in computed)),
        postTaxCorpus=post_tax,
        timeHorizon=settings.timeHorizon,
        entries=entries,
    )

    # 2) today's-money view over the horizon (or the longest tenure without one)
    if settings.adjustInflation and computed:
        years = settings.timeHorizon or max(entry.tenureYears for entry in computed)
        inflation = to_decimal(settings.inflationRate)
        totals.realCorpus = round_money(real_value(nominal, inflation, years))
        totals.realPostTaxCorpus = round_money(real_value(post_tax, inflation, years))
        totals.purchasingPower = purchasing_power(nominal, years, settings.categoryInflation)

    logger.info(
        "corpus aggregated: %d/%d instruments computed, nominal=%.2f post_tax=%.2f",
        len(computed),
        len(entries),
        nominal,
        post_tax,
    )
    return totals


__all__ = [
    "aggregate_corpus",
    "effective_tenure",
    "project_entry",
]
