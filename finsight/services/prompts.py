"""Prompt builders for the insight endpoints. Pure string formatting."""

from __future__ import annotations

import json
from typing import List

from finsight.core.bonds import BondSpec, BondValuation
from finsight.core.projection import LifeEvent, ProjectionInput, ProjectionSnapshot
from finsight.models import Profile


def wealth_path_prompt(
    projection: ProjectionInput,
    snapshots: List[ProjectionSnapshot],
    shock_label: str,
) -> str:
    events = ", ".join(_describe_event(e) for e in projection.lifeEvents) or "none"
    final = snapshots[-1].nominalBalance
    return (
        f"Initial ${projection.initialBalance:,.0f}, Monthly ${projection.monthlyContribution:,.0f}, "
        f"{projection.annualReturnRatePct}% growth over {projection.horizonYears} years. "
        f"Scenario: {shock_label}. Events: {events}. "
        f"Final wealth: ${final:,.0f} "
        f"(${snapshots[-1].inflationAdjustedBalance:,.0f} in today's money).\n"
        "Analyze this wealth projection and explain how the life milestones changed the "
        "trajectory. Return a short verdict, pros, cons and one strategy, under 150 words."
    )


def bond_strategy_prompt(profile: Profile, spec: BondSpec, valuation: BondValuation) -> str:
    bond_positions = sum(1 for asset in profile.assets if asset.type == "bond")
    simulation = {**spec.model_dump(), **valuation.model_dump()}
    return (
        "Act as a fixed income strategist teaching a beginner.\n"
        f"User profile: net worth ${profile.totalBalance:,.0f}, current bonds: {bond_positions} positions.\n"
        f"Active simulation: {json.dumps(simulation)}\n\n"
        "Provide:\n"
        "1. A simple 'bond teeter-totter' analogy relating current market rates to this bond's price.\n"
        "2. A risk rating (AAA to D) for the simulated scenario.\n"
        "3. Three bond literacy tips covering duration, credit spread and default risk.\n"
        "4. A recommendation: Hold, Sell or Ladder.\n"
        "5. How duration amplifies the price impact of rate moves for this bond."
    )


def health_audit_prompt(profile: Profile) -> str:
    savings = sum(a.balance for a in profile.assets if a.type == "savings")
    debt = abs(sum(a.balance for a in profile.assets if a.type == "debt"))
    emergency_months = savings / profile.monthlyExpenses if profile.monthlyExpenses > 0 else 0.0
    dti = debt / (profile.monthlyIncome * 12) if profile.monthlyIncome > 0 else 0.0

    data = {
        "netWorth": profile.totalBalance,
        "income": profile.monthlyIncome,
        "expenses": profile.monthlyExpenses,
        "savings": savings,
        "debt": debt,
        "emergencyFundMonths": f"{emergency_months:.1f}",
        "dti": f"{dti * 100:.1f}%",
        "assets": [{"type": a.type, "bal": a.balance} for a in profile.assets],
    }
    return (
        'Perform a robust "Financial Resilience Audit" for this user. Return JSON with a '
        "0-100 score, a verdict, metrics (emergencyFund, debtRatio, diversification, each "
        "0-100) and a list of insights.\n"
        f"User data: {json.dumps(data)}"
    )


def _describe_event(event: LifeEvent) -> str:
    return f"{event.name or event.id} in Yr {event.yearIndex}"
