"""Closed-form debt amortization: months to payoff and total interest."""

from __future__ import annotations

import math
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_serializer

from finsight.core.errors import InvalidDebtSpec

NEVER = "never"


class DebtSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    # Ledger balance of the debt; negative balances are accepted.
    principal: float
    annualInterestRatePct: float = 0.0
    monthlyPayment: float = 0.0


class DebtPayoffResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    monthsToPayoff: Union[int, Literal["never"]]
    totalInterestPaid: float
    status: Literal["clear", "active", "warning"]

    @property
    def pays_off(self) -> bool:
        return self.monthsToPayoff != NEVER

    @field_serializer("totalInterestPaid")
    def _finite_interest(self, value: float) -> Optional[float]:
        return None if math.isinf(value) else value


def validate_debt_spec(spec: DebtSpec) -> List[str]:
    errors: List[str] = []
    for name in ("principal", "annualInterestRatePct", "monthlyPayment"):
        if not math.isfinite(getattr(spec, name)):
            errors.append(f"{name} must be a finite number")
    if spec.annualInterestRatePct < 0:
        errors.append("annualInterestRatePct must be >= 0")
    if spec.monthlyPayment < 0:
        errors.append("monthlyPayment must be >= 0")
    return errors


def solve_payoff(spec: DebtSpec) -> DebtPayoffResult:
    """
    Months until the debt is cleared at a fixed monthly payment.

      - zero balance            -> clear
      - payment <= interest     -> warning, never pays off, infinite interest
      - otherwise               -> n = -ln(1 - i*P/A) / ln(1 + i), rounded up

    Interest is taken from the fractional month count, before rounding up.
    """
    errors = validate_debt_spec(spec)
    if errors:
        raise InvalidDebtSpec(errors)

    principal = abs(spec.principal)
    rate = spec.annualInterestRatePct / 100 / 12
    payment = spec.monthlyPayment

    if principal <= 0:
        return DebtPayoffResult(monthsToPayoff=0, totalInterestPaid=0.0, status="clear")
    if payment <= principal * rate or payment == 0:
        return DebtPayoffResult(monthsToPayoff=NEVER, totalInterestPaid=math.inf, status="warning")

    if rate == 0:
        months = principal / payment
    else:
        months = -math.log(1 - rate * principal / payment) / math.log(1 + rate)
    total_interest = months * payment - principal

    return DebtPayoffResult(
        monthsToPayoff=math.ceil(months),
        totalInterestPaid=float(round(total_interest)),
        status="active",
    )
