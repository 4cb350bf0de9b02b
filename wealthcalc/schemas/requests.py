"""Data contracts for the HTTP API."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wealthcalc.models import (
    Compounding,
    GrowthMode,
    InstrumentConfig,
    InstrumentType,
    ProjectionSettings,
    TaxContext,
    TaxPolicy,
)


class PingResponse(BaseModel):
    """Health-check payload."""

    message: str = Field(..., description="Static response used for health checks.")


class ProjectionRequest(BaseModel):
    """One instrument to project, with the caller's tax and inflation preferences."""

    model_config = ConfigDict(extra="forbid")

    instrument: InstrumentConfig
    taxContext: TaxContext = Field(
        default_factory=TaxContext,
        description="Income tax slab and LTCG exemption already used this year.",
    )
    settings: ProjectionSettings = Field(
        default_factory=ProjectionSettings,
        description="Inflation rate, tax method and optional corpus horizon.",
    )


class CorpusRequest(BaseModel):
    """Several instruments projected together into one corpus."""

    model_config = ConfigDict(extra="forbid")

    instruments: List[InstrumentConfig] = Field(..., min_length=1)
    taxContext: TaxContext = Field(default_factory=TaxContext)
    settings: ProjectionSettings = Field(default_factory=ProjectionSettings)


class InstrumentInfo(BaseModel):
    """Catalog entry used by clients to prefill forms."""

    instrument: InstrumentType
    name: str
    growthMode: GrowthMode
    defaultRate: Optional[float] = Field(None, description="Percent per year; None when derived from an allocation.")
    compounding: Compounding
    lockInYears: Optional[float] = None
    yearlyCap: Optional[float] = None
    taxPolicy: TaxPolicy
    taxNotes: str
    defaults: Dict[str, float] = Field(default_factory=dict, description="Secondary defaults such as ETF kind rates.")


class InstrumentCatalogResponse(BaseModel):
    instruments: List[InstrumentInfo]
