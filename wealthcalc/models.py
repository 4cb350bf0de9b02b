from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wealthcalc.config import (
    DEFAULT_CATEGORY_INFLATION,
    DEFAULT_INFLATION_RATE,
    DEFAULT_TAX_SLAB,
)

# Rates on every model below are percentages (8.2 means 8.2% p.a.) except
# TaxContext.incomeTaxSlab, which is a decimal share (0.30).

ALTERNATIVE_CEILING = 5.0


class InstrumentType(str, Enum):
    PPF = "ppf"
    SSY = "ssy"
    FD = "fd"
    RD = "rd"
    NSC = "nsc"
    SCSS = "scss"
    POMIS = "pomis"
    SGB = "sgb"
    NPS = "nps"
    SIP = "sip"
    EQUITY = "equity"
    ELSS = "elss"
    IPO = "ipo"
    DEBT_MUTUAL_FUND = "debt_mutual_fund"
    ETF = "etf"
    REITS = "reits"
    BONDS_54EC = "bonds_54ec"


class GrowthMode(str, Enum):
    RECURRING_FIXED_SCHEME = "recurring_fixed_scheme"
    LUMP_SUM_FIXED_SCHEME = "lump_sum_fixed_scheme"
    MARKET_LINKED_SIP = "market_linked_sip"
    MARKET_LINKED_LUMPSUM = "market_linked_lumpsum"
    PENSION_SCHEME = "pension_scheme"
    PAYOUT_SCHEME = "payout_scheme"
    GOVERNMENT_BOND_HYBRID = "government_bond_hybrid"
    LISTING_EVENT = "listing_event"


class Frequency(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ONCE = "once"


class Compounding(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"
    CUMULATIVE = "cumulative"


class EtfKind(str, Enum):
    EQUITY = "equity"
    DEBT = "debt"
    GOLD = "gold"
    INTERNATIONAL = "international"


class TaxPolicy(str, Enum):
    EXEMPT = "exempt"
    SLAB_ON_INTEREST = "slab_on_interest"
    CAPITAL_GAINS = "capital_gains"
    INDEXED = "indexed"
    PARTIAL_EXEMPT = "partial_exempt"
    MATURITY_EXEMPT = "maturity_exempt"


class TaxMethod(str, Enum):
    WITHDRAWAL = "withdrawal"
    ACCUMULATION = "accumulation"
    BOTH = "both"


class ProjectionStatus(str, Enum):
    COMPUTED = "computed"
    INCOMPLETE = "incomplete"
    NOT_COMPUTABLE = "not_computable"
    FAILED = "failed"


# -----------------------------
# Inputs
# -----------------------------


class ContributionPlan(BaseModel):
    """amount per period; with step-up, each year's total is
    min(amount * periods * (1 + stepUpRate)^yearIndex, capPerYear)."""

    model_config = ConfigDict(extra="forbid")

    amount: float = 0.0
    frequency: Optional[Frequency] = Field(
        default=None,
        description="Defaults to the instrument's own schedule (yearly for PPF/SSY, monthly otherwise).",
    )
    stepUpEnabled: bool = False
    stepUpRate: float = Field(default=0.0, ge=0, le=100)
    capPerYear: Optional[float] = Field(default=None, gt=0)


class AllocationMix(BaseModel):
    model_config = ConfigDict(extra="forbid")

    equity: float = Field(default=0.0, ge=0, le=100)
    corporateBonds: float = Field(default=0.0, ge=0, le=100)
    governmentBonds: float = Field(default=0.0, ge=0, le=100)
    alternative: float = Field(default=0.0, ge=0, le=100)

    def total(self) -> float:
        return self.equity + self.corporateBonds + self.governmentBonds + self.alternative


class AssetReturns(BaseModel):
    model_config = ConfigDict(extra="forbid")

    equity: float = 12.0
    corporateBonds: float = 9.0
    governmentBonds: float = 8.0
    alternative: float = 8.0


class ExistingInvestment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    currentValue: float = Field(ge=0)
    yearsInvested: float = Field(default=0.0, ge=0, le=100)
    expectedReturnRate: Optional[float] = Field(default=None, ge=-100, le=100)


class InstrumentConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    instrument: InstrumentType
    label: Optional[str] = None

    contribution: ContributionPlan = Field(default_factory=ContributionPlan)
    tenureYears: Optional[float] = Field(default=None, ge=0, le=100)
    rate: Optional[float] = Field(default=None, ge=-100, le=100)
    compounding: Optional[Compounding] = None

    # NPS
    allocation: Optional[AllocationMix] = None
    assetReturns: Optional[AssetReturns] = None
    age: Optional[int] = Field(default=None, ge=0, le=120)
    ageBasedCapsOverTime: bool = False

    # IPO: either a listing gain in percent or issue/listing prices
    listingGain: Optional[float] = Field(default=None, ge=-100)
    issuePrice: Optional[float] = Field(default=None, gt=0)
    listingPrice: Optional[float] = Field(default=None, gt=0)

    # SGB coupon, paid semi-annually
    goldFixedRate: float = Field(default=2.5, ge=0, le=100)

    # ETF / REITs
    expenseRatio: Optional[float] = Field(default=None, ge=0, le=10)
    etfKind: Optional[EtfKind] = None
    dividendYield: Optional[float] = Field(default=None, ge=0, le=100)

    # SSY
    girlAge: Optional[int] = Field(default=None, ge=0, le=21)

    seniorCitizen: bool = False
    purchaseYear: Optional[int] = Field(default=None, ge=2001, le=2100)

    existing: Optional[ExistingInvestment] = None
    planToInvestMore: bool = True

    @model_validator(mode="after")
    def ensure_validity(self) -> "InstrumentConfig":
        if self.allocation is not None and self.allocation.alternative > ALTERNATIVE_CEILING:
            raise ValueError(f"alternative allocation cannot exceed {ALTERNATIVE_CEILING}%")
        return self


class TaxContext(BaseModel):
    model_config = ConfigDict(extra="forbid")

    incomeTaxSlab: float = Field(default=DEFAULT_TAX_SLAB, ge=0, le=1)
    principal: Optional[float] = Field(default=None, ge=0)
    returns: Optional[float] = None
    ltcgExemptionUsed: float = Field(default=0.0, ge=0)


class ProjectionSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    inflationRate: float = Field(default=DEFAULT_INFLATION_RATE, ge=0, le=50)
    adjustInflation: bool = True
    timeHorizon: Optional[float] = Field(default=None, gt=0, le=100)
    taxMethod: TaxMethod = TaxMethod.WITHDRAWAL
    categoryInflation: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_INFLATION)
    )


# -----------------------------
# Outputs
# -----------------------------


class EvolutionRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: int
    label: str
    openingBalance: float
    contribution: float
    growth: float
    closingBalance: float


class ProjectionResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    totalInvested: float
    returnsEarned: float
    futureValue: float
    evolution: List[EvolutionRow] = Field(default_factory=list)


class TaxResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    taxAmount: float
    postTaxCorpus: float
    taxRate: float
    taxRule: str
    policy: TaxPolicy
    taxableGain: float = 0.0
    tdsInfo: Optional[str] = None


class AnnualTaxRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: int
    interest: float
    tax: float


class InflationView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    realFutureValue: float
    realReturns: float
    realRate: float
    realPostTaxValue: Optional[float] = None


class InstrumentProjection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    instrument: InstrumentType
    label: Optional[str] = None
    status: ProjectionStatus
    message: Optional[str] = None
    growthMode: Optional[GrowthMode] = None
    tenureYears: Optional[float] = None
    effectiveRate: Optional[float] = None
    projection: Optional[ProjectionResult] = None
    tax: Optional[TaxResult] = None
    inflation: Optional[InflationView] = None
    allocation: Optional[AllocationMix] = None
    annualTax: List[AnnualTaxRow] = Field(default_factory=list)
    details: Dict[str, float] = Field(default_factory=dict)


class CorpusEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    instrument: InstrumentType
    label: Optional[str] = None
    status: ProjectionStatus
    message: Optional[str] = None
    tenureYears: float = 0.0
    investedAmount: float = 0.0
    existingValue: float = 0.0
    existingFutureValue: float = 0.0
    returns: float = 0.0
    maturityValue: float = 0.0
    taxAmount: float = 0.0
    postTaxValue: float = 0.0
    percentage: float = 0.0
    effectiveRate: Optional[float] = None


class CategoryPower(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    inflationRate: float
    realValue: float


class CorpusTotals(BaseModel):
    model_config = ConfigDict(extra="forbid")

    totalInvested: float
    totalExistingValue: float
    totalReturns: float
    nominalCorpus: float
    totalTax: float
    postTaxCorpus: float
    realCorpus: Optional[float] = None
    realPostTaxCorpus: Optional[float] = None
    timeHorizon: Optional[float] = None
    entries: List[CorpusEntry] = Field(default_factory=list)
    purchasingPower: List[CategoryPower] = Field(default_factory=list)
