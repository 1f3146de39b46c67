from __future__ import annotations

import logging
import math
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from finsight.core.errors import InvalidProjectionInput

logger = logging.getLogger(__name__)

# Shocked rates apply to years 0..SHOCK_WINDOW_YEARS-1, then fade out.
SHOCK_WINDOW_YEARS = 3

MONTHS_PER_YEAR = 12


class MacroShock(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    returnModifierPct: float = 0.0
    inflationModifierPct: float = 0.0


class ShockPreset(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    label: str
    shock: MacroShock


SHOCK_PRESETS: Dict[str, ShockPreset] = {
    preset.id: preset
    for preset in (
        ShockPreset(id="none", label="Steady Growth", shock=MacroShock()),
        ShockPreset(
            id="2008",
            label="Market Crash",
            shock=MacroShock(returnModifierPct=-15.0, inflationModifierPct=0.0),
        ),
        ShockPreset(
            id="boom",
            label="Tech Boom",
            shock=MacroShock(returnModifierPct=10.0, inflationModifierPct=2.0),
        ),
        ShockPreset(
            id="stag",
            label="Stagflation",
            shock=MacroShock(returnModifierPct=-2.0, inflationModifierPct=6.0),
        ),
    )
}


class LifeEvent(BaseModel):
    """A discrete milestone landing at the start of simulated year ``yearIndex``.

    ``oneTimeImpact`` hits both balances once; ``monthlyFlowDelta`` is added to
    the running monthly contribution for every remaining month of the horizon.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str = ""
    yearIndex: int
    oneTimeImpact: float = 0.0
    monthlyFlowDelta: float = 0.0


class ProjectionInput(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    initialBalance: float
    monthlyContribution: float = 0.0
    annualReturnRatePct: float
    annualInflationPct: float = 0.0
    taxDragPct: float = 0.0
    horizonYears: int
    shock: MacroShock = Field(default_factory=MacroShock)
    lifeEvents: List[LifeEvent] = Field(default_factory=list)


class ProjectionSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    yearIndex: int
    nominalBalance: float
    inflationAdjustedBalance: float
    eventsAppliedThisYear: List[str] = Field(default_factory=list)


def get_shock_preset(preset_id: str) -> ShockPreset:
    try:
        return SHOCK_PRESETS[preset_id]
    except KeyError:
        raise InvalidProjectionInput([f"unknown shock preset '{preset_id}'"]) from None


def validate_projection_input(projection: ProjectionInput, shock_window_years: int) -> List[str]:
    """Collect every reason ``projection`` cannot be simulated."""
    errors: List[str] = []

    numeric = {
        "initialBalance": projection.initialBalance,
        "monthlyContribution": projection.monthlyContribution,
        "annualReturnRatePct": projection.annualReturnRatePct,
        "annualInflationPct": projection.annualInflationPct,
        "taxDragPct": projection.taxDragPct,
        "shock.returnModifierPct": projection.shock.returnModifierPct,
        "shock.inflationModifierPct": projection.shock.inflationModifierPct,
    }
    for name, value in numeric.items():
        if not math.isfinite(value):
            errors.append(f"{name} must be a finite number")

    if math.isfinite(projection.initialBalance) and projection.initialBalance < 0:
        errors.append("initialBalance must be >= 0")
    if math.isfinite(projection.taxDragPct) and not 0 <= projection.taxDragPct <= 100:
        errors.append("taxDragPct must be between 0 and 100")
    if projection.horizonYears < 0:
        errors.append("horizonYears must be >= 0")
    if shock_window_years < 0:
        errors.append("shock window must be >= 0 years")

    seen_ids = set()
    for event in projection.lifeEvents:
        if event.id in seen_ids:
            errors.append(f"life event id '{event.id}' is duplicated")
        seen_ids.add(event.id)
        if event.yearIndex < 0:
            errors.append(f"life event '{event.id}' has negative yearIndex")
        if not (math.isfinite(event.oneTimeImpact) and math.isfinite(event.monthlyFlowDelta)):
            errors.append(f"life event '{event.id}' impacts must be finite")

    return errors


def events_for_year(events: List[LifeEvent], year_index: int) -> List[LifeEvent]:
    return [event for event in events if event.yearIndex == year_index]


def project_wealth_path(
    projection: ProjectionInput,
    shock_window_years: int = SHOCK_WINDOW_YEARS,
) -> List[ProjectionSnapshot]:
    """
    Simulate the balance trajectory year by year.

    Order of operations (per year):
      1) Apply this year's life events (one-time impacts + monthly deltas).
      2) Record a snapshot (post-event, pre-compounding, floored at 0).
      3) Unless this is the final year, run 12 monthly steps:
           nominal += contribution + growth * (1 - taxDrag)
           real     = (real + contribution) * (1 + (return - inflation) / 12)
         using shocked rates while year < shock_window_years.

    The real series carries no tax drag.
    """
    errors = validate_projection_input(projection, shock_window_years)
    if errors:
        raise InvalidProjectionInput(errors)

    base_return = projection.annualReturnRatePct
    base_inflation = projection.annualInflationPct
    shocked_return = base_return + projection.shock.returnModifierPct
    shocked_inflation = base_inflation + projection.shock.inflationModifierPct
    tax_keep = 1 - projection.taxDragPct / 100

    nominal = float(projection.initialBalance)
    real = float(projection.initialBalance)
    monthly = float(projection.monthlyContribution)

    snapshots: List[ProjectionSnapshot] = []
    for year_index in range(projection.horizonYears + 1):
        applied = events_for_year(projection.lifeEvents, year_index)
        for event in applied:
            nominal += event.oneTimeImpact
            real += event.oneTimeImpact
            monthly += event.monthlyFlowDelta

        if not (math.isfinite(nominal) and math.isfinite(real)):
            raise InvalidProjectionInput([f"projected balance is not finite at yearIndex {year_index}"])

        snapshots.append(
            ProjectionSnapshot(
                yearIndex=year_index,
                nominalBalance=_floor_currency(nominal),
                inflationAdjustedBalance=_floor_currency(real),
                eventsAppliedThisYear=[event.name for event in applied],
            )
        )

        if year_index == projection.horizonYears:
            break

        if year_index < shock_window_years:
            year_return, year_inflation = shocked_return, shocked_inflation
        else:
            year_return, year_inflation = base_return, base_inflation

        monthly_return = year_return / 100 / MONTHS_PER_YEAR
        monthly_real = (year_return - year_inflation) / 100 / MONTHS_PER_YEAR
        for _ in range(MONTHS_PER_YEAR):
            growth = nominal * monthly_return
            nominal = nominal + monthly + growth * tax_keep
            real = (real + monthly) * (1 + monthly_real)

    logger.debug(
        "projected %d years: final nominal=%.2f real=%.2f",
        projection.horizonYears,
        snapshots[-1].nominalBalance,
        snapshots[-1].inflationAdjustedBalance,
    )
    return snapshots


def _floor_currency(value: float) -> float:
    return float(max(0, round(value)))


__all__ = [
    "SHOCK_WINDOW_YEARS",
    "SHOCK_PRESETS",
    "MacroShock",
    "ShockPreset",
    "LifeEvent",
    "ProjectionInput",
    "ProjectionSnapshot",
    "get_shock_preset",
    "validate_projection_input",
    "events_for_year",
    "project_wealth_path",
]
