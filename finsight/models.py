from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from finsight.core.projection import LifeEvent

AssetType = Literal["savings", "stock", "bond", "real_estate", "crypto", "commodity", "debt"]
Frequency = Literal["weekly", "bi-weekly", "monthly"]


class Asset(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    balance: float
    type: AssetType
    icon: str = ""
    color: str = ""
    quantity: Optional[float] = None
    unitPrice: Optional[float] = None
    ticker: Optional[str] = None
    isLinked: bool = False
    isRecurring: bool = False
    recurringAmount: Optional[float] = None
    recurringFrequency: Optional[Frequency] = None
    lastRecurringProcessedDate: Optional[str] = None
    interestRate: Optional[float] = Field(default=None, ge=0)
    minimumPayment: Optional[float] = Field(default=None, ge=0)
    purchasePrice: Optional[float] = None
    estimatedValue: Optional[float] = None
    appreciationRate: Optional[float] = None


class IncomeStream(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    amount: float
    frequency: Literal["monthly", "bi-weekly", "weekly", "one-time"] = "monthly"


class BudgetCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    target: float
    actual: float


class UserGoal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    target: float
    current: float


class Profile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    totalBalance: float = 0.0
    monthlySavings: float = 0.0
    monthlyIncome: float = 0.0
    monthlyExpenses: float = 0.0
    expectedReturn: float = 0.0
    assets: List[Asset] = Field(default_factory=list)
    incomeStreams: List[IncomeStream] = Field(default_factory=list)
    budgets: List[BudgetCategory] = Field(default_factory=list)
    goals: List[UserGoal] = Field(default_factory=list)
    lifeEvents: List[LifeEvent] = Field(default_factory=list)
    healthScore: Optional[float] = None


class AppState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    profiles: List[Profile]
    activeProfileId: str
