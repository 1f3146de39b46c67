from __future__ import annotations

from math import isclose

import pytest

from finsight.core.projection import LifeEvent, project_wealth_path
from finsight.domain.summary import (
    debt_payoffs,
    estimate_income_tax,
    harvesting_candidates,
    health_label,
    projection_input_from_profile,
    summarize_profile,
)
from finsight.models import Asset, Profile


def sample_profile() -> Profile:
    return Profile(
        id="p1",
        name="Sample",
        totalBalance=51500,
        monthlySavings=1500,
        monthlyIncome=6500,
        monthlyExpenses=3260,
        expectedReturn=8,
        assets=[
            Asset(id="a", name="Cash", balance=15000, type="savings"),
            Asset(id="b", name="SPY", balance=45000, type="stock", quantity=100, purchasePrice=480, ticker="SPY"),
            Asset(id="c", name="Student Debt", balance=-8500, type="debt", interestRate=4.5, minimumPayment=250),
            Asset(id="d", name="Card", balance=-3000, type="debt", interestRate=24),
        ],
        lifeEvents=[LifeEvent(id="e", name="House", yearIndex=5, oneTimeImpact=-60000)],
    )


def test_summary_figures():
    summary = summarize_profile(sample_profile())

    assert summary.totalAssets == 60000
    assert summary.totalDebt == 11500
    assert summary.netWorth == 48500
    assert summary.freeCashFlow == 3240
    assert summary.debtRatioPct == 19.2
    assert summary.burnRatePct == 50.2
    assert summary.assetCount == 4


def test_summary_without_income_or_assets_avoids_division_by_zero():
    summary = summarize_profile(Profile(id="p", name="Empty", monthlyExpenses=100))

    assert summary.debtRatioPct == 0.0
    assert summary.burnRatePct == 10000.0


@pytest.mark.parametrize(
    "score, label",
    [(10, "Critical"), (40, "Fragile"), (59.9, "Fragile"), (60, "Stable"), (80, "Resilient")],
)
def test_health_label_thresholds(score, label):
    assert health_label(score) == label


@pytest.mark.parametrize(
    "income, expected",
    [
        (10000, 1000.0),
        (20000, 1100 + 9000 * 0.12),
        (78000, 5147 + (78000 - 44725) * 0.22),
        (120000, 16290 + (120000 - 95375) * 0.24),
    ],
)
def test_income_tax_estimate(income, expected):
    assert isclose(estimate_income_tax(income), expected)


def test_harvesting_candidates_flag_stocks_below_cost():
    candidates = harvesting_candidates(sample_profile())

    assert [c.assetId for c in candidates] == ["b"]
    assert candidates[0].unrealizedLoss == 3000


def test_debt_payoffs_cover_every_debt():
    outlooks = {o.assetId: o.payoff for o in debt_payoffs(sample_profile())}

    assert outlooks["c"].status == "active"
    # no minimum payment recorded: interest outruns payment
    assert outlooks["d"].status == "warning"


def test_profile_maps_to_projection_input():
    projection = projection_input_from_profile(sample_profile(), horizon_years=10)

    assert projection.initialBalance == 51500
    assert projection.monthlyContribution == 1500
    assert projection.annualReturnRatePct == 8
    assert projection.annualInflationPct == 3.0
    assert projection.taxDragPct == 15.0

    snapshots = project_wealth_path(projection)
    assert len(snapshots) == 11
    assert snapshots[5].eventsAppliedThisYear == ["House"]


def test_negative_net_balance_starts_projection_at_zero():
    profile = sample_profile().model_copy(update={"totalBalance": -2000})

    assert projection_input_from_profile(profile).initialBalance == 0.0
