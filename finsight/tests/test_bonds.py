from __future__ import annotations

from math import isclose

import pytest

from finsight.core.bonds import BondSpec, bond_price, value_bond
from finsight.core.errors import InvalidBondSpec


def test_bond_at_par_prices_at_face_value():
    valuation = value_bond(BondSpec(faceValue=1000, couponRatePct=5, marketRatePct=5, maturityYears=10))

    assert valuation.price == 1000.00
    assert valuation.standing == "par"
    assert valuation.annualCoupon == 50.0
    assert valuation.totalCoupons == 500.0
    assert valuation.capitalGainOrLoss == 0.0
    assert valuation.approxYTMPct == 5.0
    assert valuation.totalReturnPct == 50.0


def test_zero_market_rate_uses_closed_form_limit():
    spec = BondSpec(faceValue=1000, couponRatePct=5, marketRatePct=0, maturityYears=10)

    assert bond_price(spec) == 50 * 10 + 1000
    valuation = value_bond(spec)
    assert valuation.standing == "premium"
    assert valuation.capitalGainOrLoss == -500.0
    assert valuation.approxYTMPct == 0.0


def test_rising_market_rate_prices_at_discount():
    valuation = value_bond(BondSpec(faceValue=1000, couponRatePct=5, marketRatePct=6, maturityYears=10))

    assert isclose(valuation.price, 926.40, abs_tol=0.01)
    assert valuation.standing == "discount"
    assert valuation.capitalGainOrLoss > 0
    assert valuation.priceChangePct < 0
    # approximation lands near, not exactly on, the 6% market yield
    assert 5.9 < valuation.approxYTMPct < 6.1


def test_longer_maturity_swings_price_further():
    short = bond_price(BondSpec(faceValue=1000, couponRatePct=3, marketRatePct=7, maturityYears=2))
    long = bond_price(BondSpec(faceValue=1000, couponRatePct=3, marketRatePct=7, maturityYears=30))

    assert long < short < 1000


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"maturityYears": 0}, "maturityYears must be > 0"),
        ({"faceValue": -100}, "faceValue must be > 0"),
        ({"marketRatePct": -1}, "marketRatePct must be >= 0"),
        ({"couponRatePct": float("inf")}, "couponRatePct must be a finite number"),
    ],
)
def test_invalid_bond_spec_is_rejected(fields, message):
    params = {"faceValue": 1000, "couponRatePct": 5, "marketRatePct": 5, "maturityYears": 10}
    params.update(fields)

    with pytest.raises(InvalidBondSpec) as excinfo:
        value_bond(BondSpec(**params))

    assert message in excinfo.value.errors


def test_extreme_market_rate_discounts_to_near_zero():
    # (1 + r) ** n overflows a float here; the discount factor must underflow instead
    valuation = value_bond(BondSpec(faceValue=1000, couponRatePct=5, marketRatePct=1e6, maturityYears=100))

    assert 0 <= valuation.price < 0.02
    assert valuation.standing == "discount"


def test_price_rounding_to_zero_reports_zero_return_pct():
    valuation = value_bond(BondSpec(faceValue=1000, couponRatePct=0, marketRatePct=1e6, maturityYears=30))

    assert valuation.price == 0.0
    assert valuation.totalReturnPct == 0.0
    assert valuation.capitalGainOrLoss == 1000.0
    assert valuation.approxYTMPct == round(1000 / 30 / 500 * 100, 2)
