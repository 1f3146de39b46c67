"""Structured replies requested from the insight model, and their request bodies."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from finsight.core.bonds import BondSpec
from finsight.schemas.projection import ProjectionRequest


class WealthPathInsight(BaseModel):
    verdict: str
    pros: List[str]
    cons: List[str]
    strategy: str


class BondStrategyInsight(BaseModel):
    analogy: str
    riskRating: str
    tips: List[str]
    recommendation: str
    durationImpact: str


class HealthMetrics(BaseModel):
    emergencyFund: float
    debtRatio: float
    diversification: float


class HealthInsight(BaseModel):
    score: float = Field(ge=0, le=100)
    verdict: str
    metrics: HealthMetrics
    insights: List[str]


class WealthPathInsightRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    projection: ProjectionRequest


class BondInsightRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bond: BondSpec
