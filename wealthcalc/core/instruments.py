"""Static catalog: how each instrument grows and which defaults it carries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from wealthcalc.models import (
    Compounding,
    ContributionPlan,
    EtfKind,
    Frequency,
    GrowthMode,
    InstrumentType,
)


class UnknownInstrumentError(LookupError):
    def __init__(self, instrument: object):
        super().__init__(f"unknown instrument type: {instrument!r}")
        self.instrument = instrument


@dataclass(frozen=True)
class InstrumentSpec:
    instrument: InstrumentType
    name: str
    mode: GrowthMode
    default_rate: Optional[float]
    compounding: Compounding = Compounding.ANNUALLY
    frequency: Frequency = Frequency.ONCE
    market_linked: bool = False
    lock_in_years: Optional[float] = None
    fixed_tenure: Optional[float] = None
    yearly_cap: Optional[float] = None
    minimum_rate: float = 0.0
    payouts_per_year: int = 0


SMALL_SAVINGS_CAP = 150000.0
SSY_MATURITY_AGE = 21

ETF_DEFAULT_RATES: Dict[EtfKind, float] = {
    EtfKind.EQUITY: 12.0,
    EtfKind.DEBT: 7.0,
    EtfKind.GOLD: 8.0,
    EtfKind.INTERNATIONAL: 10.0,
}

REIT_DEFAULT_DIVIDEND_YIELD = 7.0
SGB_FIXED_RATE = 2.5

_CATALOG: Dict[InstrumentType, InstrumentSpec] = {
    spec.instrument: spec
    for spec in [
        InstrumentSpec(
            InstrumentType.PPF, "Public Provident Fund", GrowthMode.RECURRING_FIXED_SCHEME, 7.1,
            frequency=Frequency.YEARLY, lock_in_years=15, yearly_cap=SMALL_SAVINGS_CAP,
        ),
        InstrumentSpec(
            InstrumentType.SSY, "Sukanya Samriddhi Yojana", GrowthMode.RECURRING_FIXED_SCHEME, 8.2,
            frequency=Frequency.YEARLY, lock_in_years=21, yearly_cap=SMALL_SAVINGS_CAP,
        ),
        InstrumentSpec(
            InstrumentType.RD, "Recurring Deposit", GrowthMode.RECURRING_FIXED_SCHEME, 6.5,
            compounding=Compounding.QUARTERLY, frequency=Frequency.MONTHLY,
        ),
        InstrumentSpec(
            InstrumentType.FD, "Fixed Deposit", GrowthMode.LUMP_SUM_FIXED_SCHEME, 6.5,
            compounding=Compounding.QUARTERLY,
        ),
        InstrumentSpec(
            InstrumentType.NSC, "National Savings Certificate", GrowthMode.LUMP_SUM_FIXED_SCHEME, 7.7,
            lock_in_years=5, fixed_tenure=5,
        ),
        InstrumentSpec(
            InstrumentType.BONDS_54EC, "54EC Capital Gain Bonds", GrowthMode.LUMP_SUM_FIXED_SCHEME, 5.75,
            lock_in_years=5, fixed_tenure=5,
        ),
        InstrumentSpec(
            InstrumentType.SCSS, "Senior Citizens Savings Scheme", GrowthMode.PAYOUT_SCHEME, 8.2,
            compounding=Compounding.QUARTERLY, lock_in_years=5, minimum_rate=0.1, payouts_per_year=4,
        ),
        InstrumentSpec(
            InstrumentType.POMIS, "Post Office Monthly Income Scheme", GrowthMode.PAYOUT_SCHEME, 7.4,
            compounding=Compounding.MONTHLY, lock_in_years=5, fixed_tenure=5,
            minimum_rate=0.1, payouts_per_year=12,
        ),
        InstrumentSpec(
            InstrumentType.SGB, "Sovereign Gold Bond", GrowthMode.GOVERNMENT_BOND_HYBRID, 8.0,
            lock_in_years=5,
        ),
        InstrumentSpec(
            InstrumentType.NPS, "National Pension System", GrowthMode.PENSION_SCHEME, None,
            compounding=Compounding.MONTHLY, frequency=Frequency.MONTHLY,
        ),
        InstrumentSpec(
            InstrumentType.SIP, "Mutual Fund SIP", GrowthMode.MARKET_LINKED_SIP, 12.0,
            compounding=Compounding.MONTHLY, frequency=Frequency.MONTHLY, market_linked=True,
        ),
        InstrumentSpec(
            InstrumentType.EQUITY, "Direct Equity", GrowthMode.MARKET_LINKED_LUMPSUM, 12.0,
            market_linked=True,
        ),
        InstrumentSpec(
            InstrumentType.ELSS, "ELSS Tax Saver Fund", GrowthMode.MARKET_LINKED_SIP, 14.0,
            compounding=Compounding.MONTHLY, frequency=Frequency.MONTHLY, market_linked=True,
            lock_in_years=3,
        ),
        InstrumentSpec(
            InstrumentType.DEBT_MUTUAL_FUND, "Debt Mutual Fund", GrowthMode.MARKET_LINKED_LUMPSUM, 7.5,
            market_linked=True,
        ),
        InstrumentSpec(
            InstrumentType.ETF, "Exchange Traded Fund", GrowthMode.MARKET_LINKED_LUMPSUM, 12.0,
            market_linked=True,
        ),
        InstrumentSpec(
            InstrumentType.REITS, "Real Estate Investment Trust", GrowthMode.MARKET_LINKED_LUMPSUM, 6.0,
        ),
        InstrumentSpec(
            InstrumentType.IPO, "IPO Allotment", GrowthMode.LISTING_EVENT, 12.0,
        ),
    ]
}


def get_spec(instrument: Union[InstrumentType, str]) -> InstrumentSpec:
    try:
        key = InstrumentType(instrument)
    except ValueError as exc:
        raise UnknownInstrumentError(instrument) from exc
    try:
        return _CATALOG[key]
    except KeyError as exc:
        raise UnknownInstrumentError(instrument) from exc


def resolve_mode(spec: InstrumentSpec, plan: ContributionPlan) -> GrowthMode:
    """Market-linked instruments are lumpsums for one-off plans and SIPs otherwise.
    A plan without a frequency follows the catalog's schedule."""
    if not spec.market_linked:
        return spec.mode
    if (plan.frequency or spec.frequency) == Frequency.ONCE:
        return GrowthMode.MARKET_LINKED_LUMPSUM
    return GrowthMode.MARKET_LINKED_SIP


def catalog_defaults(spec: InstrumentSpec) -> Dict[str, float]:
    """Secondary defaults a form needs besides the headline rate."""
    if spec.instrument == InstrumentType.ETF:
        return {f"{kind.value}Rate": rate for kind, rate in ETF_DEFAULT_RATES.items()}
    if spec.instrument == InstrumentType.REITS:
        return {"dividendYield": REIT_DEFAULT_DIVIDEND_YIELD}
    if spec.instrument == InstrumentType.SGB:
        return {"goldFixedRate": SGB_FIXED_RATE}
    if spec.instrument == InstrumentType.SSY:
        return {"maturityAge": float(SSY_MATURITY_AGE)}
    return {}


def list_instruments() -> List[InstrumentSpec]:
    return list(_CATALOG.values())


__all__ = [
    "ETF_DEFAULT_RATES",
    "InstrumentSpec",
    "REIT_DEFAULT_DIVIDEND_YIELD",
    "SGB_FIXED_RATE",
    "SMALL_SAVINGS_CAP",
    "SSY_MATURITY_AGE",
    "UnknownInstrumentError",
    "catalog_defaults",
    "get_spec",
    "list_instruments",
    "resolve_mode",
]
