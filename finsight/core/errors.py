"""Input-validation errors raised by the projection engine."""

from __future__ import annotations

from typing import List


class EngineInputError(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class InvalidProjectionInput(EngineInputError):
    """Raised when a ProjectionInput cannot be simulated."""


class InvalidBondSpec(EngineInputError):
    """Raised when a BondSpec cannot be priced."""


class InvalidDebtSpec(EngineInputError):
    """Raised when a DebtSpec cannot be amortized."""
