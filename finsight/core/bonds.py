"""Present-value bond pricing and approximate yield to maturity."""

from __future__ import annotations

import math
from typing import List, Literal

from pydantic import BaseModel, ConfigDict

from finsight.core.errors import InvalidBondSpec


class BondSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    faceValue: float
    couponRatePct: float
    marketRatePct: float
    maturityYears: float


class BondValuation(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    price: float
    annualCoupon: float
    totalCoupons: float
    capitalGainOrLoss: float
    # Approximate YTM; differs slightly from an iterative solve.
    approxYTMPct: float
    totalReturn: float
    totalReturnPct: float
    priceChangePct: float
    standing: Literal["premium", "discount", "par"]


def validate_bond_spec(spec: BondSpec) -> List[str]:
    errors: List[str] = []
    for name in ("faceValue", "couponRatePct", "marketRatePct", "maturityYears"):
        if not math.isfinite(getattr(spec, name)):
            errors.append(f"{name} must be a finite number")
    if spec.faceValue <= 0:
        errors.append("faceValue must be > 0")
    if spec.maturityYears <= 0:
        errors.append("maturityYears must be > 0")
    if spec.couponRatePct < 0:
        errors.append("couponRatePct must be >= 0")
    if spec.marketRatePct < 0:
        errors.append("marketRatePct must be >= 0")
    return errors


def bond_price(spec: BondSpec) -> float:
    """Price = C * (1 - (1+r)^-n) / r + F / (1+r)^n, or C*n + F when r == 0."""
    errors = validate_bond_spec(spec)
    if errors:
        raise InvalidBondSpec(errors)

    r = spec.marketRatePct / 100
    n = spec.maturityYears
    face = spec.faceValue
    coupon = spec.couponRatePct / 100 * face

    if r == 0:
        return round(coupon * n + face, 2)
    discount = (1 + r) ** -n
    price = coupon * (1 - discount) / r + face * discount
    return round(price, 2)


def value_bond(spec: BondSpec) -> BondValuation:
    """Price the bond and derive its coupon, gain/loss and yield figures.

    Everything downstream of the price uses the rounded price.
    """
    price = bond_price(spec)
    face = spec.faceValue
    n = spec.maturityYears

    annual_coupon = spec.couponRatePct / 100 * face
    total_coupons = annual_coupon * n
    capital_gain = face - price
    total_return = total_coupons + capital_gain
    ytm = (annual_coupon + capital_gain / n) / ((face + price) / 2) * 100

    if price > face:
        standing = "premium"
    elif price < face:
        standing = "discount"
    else:
        standing = "par"

    return BondValuation(
        price=price,
        annualCoupon=round(annual_coupon, 2),
        totalCoupons=round(total_coupons, 2),
        capitalGainOrLoss=round(capital_gain, 2),
        approxYTMPct=round(ytm, 2),
        totalReturn=round(total_return, 2),
        totalReturnPct=round(total_return / price * 100, 2) if price else 0.0,
        priceChangePct=round((price - face) / face * 100, 2),
        standing=standing,
    )
