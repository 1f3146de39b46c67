"""Derived figures shown on the dashboard, computed from a Profile."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from finsight.core.debt import DebtPayoffResult, DebtSpec, solve_payoff
from finsight.core.projection import MacroShock, ProjectionInput
from finsight.models import Profile

DEFAULT_HORIZON_YEARS = 30
DEFAULT_INFLATION_PCT = 3.0
DEFAULT_TAX_DRAG_PCT = 15.0

# (upper bound of annual income, base tax, marginal rate, bracket floor)
TAX_BRACKETS = (
    (11000.0, 0.0, 0.10, 0.0),
    (44725.0, 1100.0, 0.12, 11000.0),
    (95375.0, 5147.0, 0.22, 44725.0),
)
TOP_BRACKET = (16290.0, 0.24, 95375.0)


class ProfileSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    totalAssets: float
    totalDebt: float
    netWorth: float
    freeCashFlow: float
    debtRatioPct: float
    burnRatePct: float
    assetCount: int


class HarvestCandidate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assetId: str
    name: str
    ticker: Optional[str] = None
    costBasis: float
    marketValue: float
    unrealizedLoss: float


class DebtOutlook(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assetId: str
    name: str
    payoff: DebtPayoffResult


def summarize_profile(profile: Profile) -> ProfileSummary:
    total_assets = sum(a.balance for a in profile.assets if a.balance > 0)
    total_debt = abs(sum(a.balance for a in profile.assets if a.balance < 0))
    return ProfileSummary(
        totalAssets=total_assets,
        totalDebt=total_debt,
        netWorth=total_assets - total_debt,
        freeCashFlow=profile.monthlyIncome - profile.monthlyExpenses,
        debtRatioPct=round(total_debt / (total_assets or 1) * 100, 1),
        burnRatePct=round(profile.monthlyExpenses / (profile.monthlyIncome or 1) * 100, 1),
        assetCount=len(profile.assets),
    )


def health_label(score: float) -> str:
    if score < 40:
        return "Critical"
    if score < 60:
        return "Fragile"
    if score < 80:
        return "Stable"
    return "Resilient"


def estimate_income_tax(annual_income: float) -> float:
    """Rough federal estimate from a simplified bracket table. Not tax advice."""
    for upper, base, rate, floor in TAX_BRACKETS:
        if annual_income < upper:
            return base + (annual_income - floor) * rate
    base, rate, floor = TOP_BRACKET
    return base + (annual_income - floor) * rate


def harvesting_candidates(profile: Profile) -> List[HarvestCandidate]:
    candidates: List[HarvestCandidate] = []
    for asset in profile.assets:
        if asset.type != "stock" or not asset.purchasePrice:
            continue
        cost = asset.purchasePrice * (asset.quantity or 1)
        if asset.balance < cost:
            candidates.append(
                HarvestCandidate(
                    assetId=asset.id,
                    name=asset.name,
                    ticker=asset.ticker,
                    costBasis=cost,
                    marketValue=asset.balance,
                    unrealizedLoss=cost - asset.balance,
                )
            )
    return candidates


def debt_payoffs(profile: Profile) -> List[DebtOutlook]:
    return [
        DebtOutlook(
            assetId=asset.id,
            name=asset.name,
            payoff=solve_payoff(
                DebtSpec(
                    principal=asset.balance,
                    annualInterestRatePct=asset.interestRate or 0.0,
                    monthlyPayment=asset.minimumPayment or 0.0,
                )
            ),
        )
        for asset in profile.assets
        if asset.type == "debt"
    ]


def projection_input_from_profile(
    profile: Profile,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
    annual_inflation_pct: float = DEFAULT_INFLATION_PCT,
    tax_drag_pct: float = DEFAULT_TAX_DRAG_PCT,
    shock: Optional[MacroShock] = None,
) -> ProjectionInput:
    return ProjectionInput(
        initialBalance=max(0.0, profile.totalBalance),
        monthlyContribution=profile.monthlySavings,
        annualReturnRatePct=profile.expectedReturn,
        annualInflationPct=annual_inflation_pct,
        taxDragPct=tax_drag_pct,
        horizonYears=horizon_years,
        shock=shock or MacroShock(),
        lifeEvents=list(profile.lifeEvents),
    )
