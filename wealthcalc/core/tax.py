"""
Tax on withdrawal (and, for interest-bearing schemes, during accumulation).

Each instrument maps to one TaxRule; calculate_tax dispatches on the rule's
policy. Capital-gains style rules always tax the gain (returns), never the
whole corpus.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from wealthcalc.core.instruments import UnknownInstrumentError
from wealthcalc.core.rates import is_supplied, round_money
from wealthcalc.models import (
    AnnualTaxRow,
    EtfKind,
    EvolutionRow,
    InstrumentType,
    TaxContext,
    TaxPolicy,
    TaxResult,
)

LTCG_RATE = 0.10
STCG_RATE = 0.15
LTCG_EXEMPTION_LIMIT = 100000.0
INDEXED_LTCG_RATE = 0.20
NPS_TAXABLE_SHARE = 0.40
TDS_THRESHOLD = 40000.0
TDS_THRESHOLD_SENIOR = 50000.0
DEFAULT_INDEXATION_INFLATION = 0.06


@dataclass(frozen=True)
class TaxRule:
    policy: TaxPolicy
    notes: str
    long_term_years: float = 0.0
    tds: bool = False


_EQUITY_NOTES = "LTCG: 10% above ₹1L exemption (held > 1 year). STCG: 15% (held < 1 year)"
_SLAB_NOTES = "Interest taxed as per income slab"

TAX_RULES: Dict[InstrumentType, TaxRule] = {
    InstrumentType.PPF: TaxRule(TaxPolicy.EXEMPT, "Tax-free (EEE - Exempt, Exempt, Exempt)"),
    InstrumentType.SSY: TaxRule(TaxPolicy.EXEMPT, "Tax-free (EEE - Exempt, Exempt, Exempt)"),
    InstrumentType.FD: TaxRule(
        TaxPolicy.SLAB_ON_INTEREST,
        "Interest taxed annually as per income slab. "
        "TDS applicable if interest > ₹40,000 (₹50,000 for senior citizens)",
        tds=True,
    ),
    InstrumentType.RD: TaxRule(
        TaxPolicy.SLAB_ON_INTEREST,
        "Interest taxed annually as per income slab. "
        "TDS applicable if interest > ₹40,000 (₹50,000 for senior citizens)",
        tds=True,
    ),
    InstrumentType.NSC: TaxRule(
        TaxPolicy.SLAB_ON_INTEREST,
        "Interest taxable as per income slab. Reinvested interest qualifies for 80C deduction",
    ),
    InstrumentType.SCSS: TaxRule(
        TaxPolicy.SLAB_ON_INTEREST,
        "Interest taxable quarterly as per income slab. TDS applicable above the yearly threshold",
        tds=True,
    ),
    InstrumentType.POMIS: TaxRule(TaxPolicy.SLAB_ON_INTEREST, _SLAB_NOTES),
    InstrumentType.BONDS_54EC: TaxRule(
        TaxPolicy.SLAB_ON_INTEREST,
        "Exempts long-term capital gains on property sale (up to ₹50L per FY). "
        "Interest taxable as per income tax slab",
    ),
    InstrumentType.SIP: TaxRule(TaxPolicy.CAPITAL_GAINS, _EQUITY_NOTES, long_term_years=1),
    InstrumentType.EQUITY: TaxRule(TaxPolicy.CAPITAL_GAINS, _EQUITY_NOTES, long_term_years=1),
    InstrumentType.ELSS: TaxRule(
        TaxPolicy.CAPITAL_GAINS,
        "LTCG: 10% above ₹1L exemption (held > 3 years). STCG: 15% (held < 3 years)",
        long_term_years=3,
    ),
    InstrumentType.IPO: TaxRule(
        TaxPolicy.CAPITAL_GAINS, _EQUITY_NOTES + ". Listing gains taxable", long_term_years=1
    ),
    InstrumentType.REITS: TaxRule(
        TaxPolicy.CAPITAL_GAINS,
        _EQUITY_NOTES + ". No indexation benefit on capital gains",
        long_term_years=1,
    ),
    InstrumentType.DEBT_MUTUAL_FUND: TaxRule(
        TaxPolicy.INDEXED,
        "LTCG: 20% with indexation benefit after 3 years. "
        "STCG: taxed as per income tax slab if held < 3 years",
        long_term_years=3,
    ),
    InstrumentType.NPS: TaxRule(
        TaxPolicy.PARTIAL_EXEMPT, "60% tax-free, 40% taxable as per income slab"
    ),
    InstrumentType.SGB: TaxRule(
        TaxPolicy.MATURITY_EXEMPT,
        "Capital gains exempt if held till maturity (5 years or more). Early exit taxed at 15%",
        long_term_years=5,
    ),
}

ETF_TAX_RULES: Dict[EtfKind, TaxRule] = {
    EtfKind.EQUITY: TaxRule(TaxPolicy.CAPITAL_GAINS, "Equity ETF: " + _EQUITY_NOTES, long_term_years=1),
    EtfKind.INTERNATIONAL: TaxRule(
        TaxPolicy.CAPITAL_GAINS, "International ETF: " + _EQUITY_NOTES, long_term_years=1
    ),
    EtfKind.DEBT: TaxRule(
        TaxPolicy.INDEXED, "Debt ETF: LTCG 20% with indexation after 3 years", long_term_years=3
    ),
    EtfKind.GOLD: TaxRule(
        TaxPolicy.INDEXED, "Gold ETF: LTCG 20% with indexation after 3 years", long_term_years=3
    ),
}

# CBDT cost inflation index, base FY 2001-02 = 100; 2024 onward are estimates
CII_VALUES: Dict[int, int] = {
    2001: 100, 2002: 105, 2003: 109, 2004: 113, 2005: 117, 2006: 122,
    2007: 129, 2008: 137, 2009: 148, 2010: 167, 2011: 184, 2012: 200,
    2013: 220, 2014: 240, 2015: 254, 2016: 264, 2017: 272, 2018: 280,
    2019: 289, 2020: 301, 2021: 317, 2022: 331, 2023: 348, 2024: 363,
    2025: 378, 2026: 393,
}
CII_PROJECTED_GROWTH = 0.04


def tax_rule_for(
    instrument: Union[InstrumentType, str],
    etf_kind: Optional[EtfKind] = None,
) -> TaxRule:
    try:
        key = InstrumentType(instrument)
    except ValueError as exc:
        raise UnknownInstrumentError(instrument) from exc
    if key == InstrumentType.ETF:
        return ETF_TAX_RULES[etf_kind or EtfKind.EQUITY]
    try:
        return TAX_RULES[key]
    except KeyError as exc:
        raise UnknownInstrumentError(instrument) from exc


def cost_inflation_index(financial_year: int) -> int:
    if financial_year in CII_VALUES:
        return CII_VALUES[financial_year]
    last_year = max(CII_VALUES)
    if financial_year < min(CII_VALUES):
        raise ValueError(f"no cost inflation index before {min(CII_VALUES)}")
    projected = CII_VALUES[last_year] * (1.0 + CII_PROJECTED_GROWTH) ** (financial_year - last_year)
    return int(round(projected))


def indexed_cost(
    principal: float,
    years: float,
    inflation_rate: float = DEFAULT_INDEXATION_INFLATION,
    purchase_year: Optional[int] = None,
) -> float:
    """
    Purchase cost lifted for inflation. With a purchase year the CII table is
    used (sale year = purchase year + whole years held); otherwise the cost is
    grown at inflation_rate, which approximates the published index.
    """
    if purchase_year is not None:
        sale_year = purchase_year + int(math.ceil(years))
        return principal * cost_inflation_index(sale_year) / cost_inflation_index(purchase_year)
    return principal * (1.0 + inflation_rate) ** years


def _split_gain(future_value: float, context: TaxContext) -> tuple[float, float]:
    """(principal, gain) from the context, falling back to each other and to FV."""
    if is_supplied(context.principal):
        principal = context.principal
        gain = context.returns if is_supplied(context.returns) else future_value - principal
    elif is_supplied(context.returns):
        gain = context.returns
        principal = future_value - gain
    else:
        principal, gain = future_value, 0.0
    return principal, max(0.0, gain)


def _tds_note(rule: TaxRule, gain: float, holding_period: float, senior_citizen: bool) -> Optional[str]:
    if not rule.tds or holding_period <= 0:
        return None
    threshold = TDS_THRESHOLD_SENIOR if senior_citizen else TDS_THRESHOLD
    yearly_interest = gain / holding_period
    if yearly_interest <= threshold:
        return None
    return (
        f"TDS applicable: average yearly interest ₹{yearly_interest:,.0f} "
        f"exceeds the ₹{threshold:,.0f} threshold"
    )


def calculate_tax(
    future_value: float,
    instrument: Union[InstrumentType, str],
    holding_period: float,
    context: TaxContext,
    *,
    etf_kind: Optional[EtfKind] = None,
    inflation_rate: float = DEFAULT_INDEXATION_INFLATION,
    purchase_year: Optional[int] = None,
    senior_citizen: bool = False,
) -> TaxResult:
    """
    Tax due when the corpus is withdrawn after `holding_period` years.

    Conventions:
      - exempt:            nothing is taxed
      - slab_on_interest:  gain * slab
      - capital_gains:     long term 10% of (gain - unused ₹1L exemption), short term 15% of gain
      - indexed:           long term 20% of (FV - indexed cost), short term gain * slab
      - partial_exempt:    40% of the gain taxed at slab
      - maturity_exempt:   exempt after the lock-in, 15% of gain before it
    """
    rule = tax_rule_for(instrument, etf_kind)
    if future_value <= 0:
        return TaxResult(
            taxAmount=0.0,
            postTaxCorpus=round_money(max(future_value, 0.0)),
            taxRate=0.0,
            taxRule=rule.notes,
            policy=rule.policy,
        )

    slab = context.incomeTaxSlab
    principal, gain = _split_gain(future_value, context)
    long_term = holding_period >= rule.long_term_years

    taxable = 0.0
    tax = 0.0
    if rule.policy == TaxPolicy.EXEMPT:
        pass
    elif rule.policy == TaxPolicy.SLAB_ON_INTEREST:
        taxable = gain
        tax = gain * slab
    elif rule.policy == TaxPolicy.CAPITAL_GAINS:
        if long_term:
            available = max(0.0, LTCG_EXEMPTION_LIMIT - context.ltcgExemptionUsed)
            taxable = max(0.0, gain - available)
            tax = taxable * LTCG_RATE
        else:
            taxable = gain
            tax = gain * STCG_RATE
    elif rule.policy == TaxPolicy.INDEXED:
        if long_term:
            cost = indexed_cost(principal, holding_period, inflation_rate, purchase_year)
            taxable = max(0.0, future_value - cost)
            tax = taxable * INDEXED_LTCG_RATE
        else:
            taxable = gain
            tax = gain * slab
    elif rule.policy == TaxPolicy.PARTIAL_EXEMPT:
        taxable = gain * NPS_TAXABLE_SHARE
        tax = taxable * slab
    elif rule.policy == TaxPolicy.MATURITY_EXEMPT:
        if not long_term:
            taxable = gain
            tax = gain * STCG_RATE

    tax = min(max(tax, 0.0), gain)
    return TaxResult(
        taxAmount=round_money(tax),
        postTaxCorpus=round_money(future_value - tax),
        taxRate=round(tax / future_value * 100.0, 2),
        taxRule=rule.notes,
        policy=rule.policy,
        taxableGain=round_money(taxable),
        tdsInfo=_tds_note(rule, gain, holding_period, senior_citizen),
    )


def annual_tax_breakdown(
    instrument: Union[InstrumentType, str],
    evolution: Sequence[EvolutionRow],
    slab: float,
    etf_kind: Optional[EtfKind] = None,
) -> List[AnnualTaxRow]:
    """Tax paid year by year on accrued interest; only slab-taxed schemes accrue tax annually."""
    rule = tax_rule_for(instrument, etf_kind)
    if rule.policy != TaxPolicy.SLAB_ON_INTEREST:
        return []
    rows: List[AnnualTaxRow] = []
    for row in evolution:
        if row.period == 0:
            continue
        interest = max(0.0, row.growth)
        rows.append(AnnualTaxRow(period=row.period, interest=interest, tax=round_money(interest * slab)))
    return rows


__all__ = [
    "CII_VALUES",
    "ETF_TAX_RULES",
    "LTCG_EXEMPTION_LIMIT",
    "TAX_RULES",
    "TaxRule",
    "annual_tax_breakdown",
    "calculate_tax",
    "cost_inflation_index",
    "indexed_cost",
    "tax_rule_for",
]
