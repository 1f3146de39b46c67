"""HTTP request bodies for the projection endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finsight.core.projection import LifeEvent, MacroShock, ProjectionInput, get_shock_preset
from finsight.domain.summary import (
    DEFAULT_HORIZON_YEARS,
    DEFAULT_INFLATION_PCT,
    DEFAULT_TAX_DRAG_PCT,
)


class ProjectionRequest(BaseModel):
    """ProjectionInput plus the choice of a named shock preset."""

    model_config = ConfigDict(extra="forbid")

    initialBalance: float
    monthlyContribution: float = 0.0
    annualReturnRatePct: float
    annualInflationPct: float = 0.0
    taxDragPct: float = 0.0
    horizonYears: int
    shock: Optional[MacroShock] = None
    shockPreset: Optional[str] = None
    shockWindowYears: Optional[int] = None
    lifeEvents: List[LifeEvent] = Field(default_factory=list)

    @model_validator(mode="after")
    def one_shock_source(self) -> "ProjectionRequest":
        if self.shock is not None and self.shockPreset is not None:
            raise ValueError("give either shock or shockPreset, not both")
        return self

    def resolve_shock(self) -> MacroShock:
        if self.shockPreset is not None:
            return get_shock_preset(self.shockPreset).shock
        return self.shock or MacroShock()

    def shock_label(self) -> str:
        if self.shockPreset is not None:
            return get_shock_preset(self.shockPreset).label
        return "Custom" if self.shock else "Steady Growth"

    def to_input(self) -> ProjectionInput:
        return ProjectionInput(
            initialBalance=self.initialBalance,
            monthlyContribution=self.monthlyContribution,
            annualReturnRatePct=self.annualReturnRatePct,
            annualInflationPct=self.annualInflationPct,
            taxDragPct=self.taxDragPct,
            horizonYears=self.horizonYears,
            shock=self.resolve_shock(),
            lifeEvents=self.lifeEvents,
        )


class ProfileProjectionRequest(BaseModel):
    """Overrides applied when projecting the stored active profile."""

    model_config = ConfigDict(extra="forbid")

    horizonYears: int = DEFAULT_HORIZON_YEARS
    annualInflationPct: float = DEFAULT_INFLATION_PCT
    taxDragPct: float = DEFAULT_TAX_DRAG_PCT
    shockPreset: str = "none"
