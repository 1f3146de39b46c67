from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from finsight.models import AppState, Asset, BudgetCategory, IncomeStream, Profile, UserGoal

logger = logging.getLogger(__name__)

RECURRING_INTERVALS: Dict[str, timedelta] = {
    "weekly": timedelta(days=7),
    "bi-weekly": timedelta(days=14),
    "monthly": timedelta(days=30),
}


class ProfileRepository(Protocol):
    """Storage seam for the application state; the engine never touches it."""

    def load(self) -> AppState:
        ...

    def save(self, state: AppState) -> None:
        ...

    def clear(self) -> None:
        ...


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_budgets() -> List[BudgetCategory]:
    return [
        BudgetCategory(id="b1", name="Housing & Utilities", target=2000, actual=1950),
        BudgetCategory(id="b2", name="Groceries", target=600, actual=580),
        BudgetCategory(id="b3", name="Dining Out", target=400, actual=450),
        BudgetCategory(id="b4", name="Transport", target=300, actual=280),
    ]


def default_assets(now: Optional[datetime] = None) -> List[Asset]:
    stamp = (now or _utcnow()).isoformat()
    return [
        Asset(
            id=_new_id(),
            name="Primary Liquidity",
            balance=15000,
            type="savings",
            icon="fa-piggy-bank",
            lastRecurringProcessedDate=stamp,
        ),
        Asset(
            id=_new_id(),
            name="S&P 500 ETF (SPY)",
            balance=45000,
            quantity=100,
            unitPrice=450,
            type="stock",
            ticker="SPY",
            isLinked=True,
            icon="fa-chart-line",
        ),
        Asset(
            id=_new_id(),
            name="Student Debt",
            balance=-8500,
            type="debt",
            icon="fa-graduation-cap",
            interestRate=4.5,
            minimumPayment=250,
            isRecurring=True,
            recurringAmount=250,
            recurringFrequency="monthly",
            lastRecurringProcessedDate=stamp,
        ),
    ]


def create_profile(name: str = "New Strategist", now: Optional[datetime] = None) -> Profile:
    assets = default_assets(now)
    budgets = default_budgets()
    total_expenses = sum(budget.actual for budget in budgets)
    return Profile(
        id=_new_id(),
        name=name,
        totalBalance=sum(asset.balance for asset in assets),
        monthlySavings=1500,
        monthlyIncome=6500,
        monthlyExpenses=total_expenses or 4000,
        expectedReturn=8,
        assets=assets,
        incomeStreams=[IncomeStream(id="i1", name="Primary Salary", amount=6500, frequency="monthly")],
        budgets=budgets,
        goals=[UserGoal(id="g1", name="Home Down Payment", target=80000, current=51500)],
        lifeEvents=[],
    )


def default_state() -> AppState:
    profile = create_profile("Executive Account")
    return AppState(profiles=[profile], activeProfileId=profile.id)


def active_profile(state: AppState) -> Profile:
    for profile in state.profiles:
        if profile.id == state.activeProfileId:
            return profile
    return state.profiles[0]


def replace_profile(state: AppState, profile: Profile) -> AppState:
    """Return a copy of ``state`` with ``profile`` swapped in by id (or appended)."""
    profiles = list(state.profiles)
    for index, existing in enumerate(profiles):
        if existing.id == profile.id:
            profiles[index] = profile
            break
    else:
        profiles.append(profile)
    return state.model_copy(update={"profiles": profiles})


def _upgrade_raw_profile(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Backfill fields older saved profiles lack."""
    upgraded = dict(raw)
    if not upgraded.get("incomeStreams"):
        upgraded["incomeStreams"] = [
            {
                "id": _new_id(),
                "name": "Salary",
                "amount": upgraded.get("monthlyIncome", 0),
                "frequency": "monthly",
            }
        ]
    if not upgraded.get("budgets"):
        upgraded["budgets"] = [budget.model_dump() for budget in default_budgets()]

    events = []
    for event in upgraded.get("lifeEvents") or []:
        event = dict(event)
        # older saves used year / monthlyImpact
        if "year" in event:
            event.setdefault("yearIndex", event.pop("year"))
        if "monthlyImpact" in event:
            event.setdefault("monthlyFlowDelta", event.pop("monthlyImpact"))
        events.append(event)
    upgraded["lifeEvents"] = events
    return upgraded


class JsonFileProfileRepository:
    """Persist the whole AppState as one JSON document on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> AppState:
        if not self.path.exists():
            return default_state()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            raw["profiles"] = [_upgrade_raw_profile(p) for p in raw.get("profiles", [])]
            state = AppState.model_validate(raw)
        except (OSError, ValueError, ValidationError, TypeError, AttributeError) as exc:
            logger.error("Failed to parse app state at %s: %s", self.path, exc)
            return default_state()

        if not state.profiles:
            return default_state()
        return state

    def save(self, state: AppState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("saved %d profiles to %s", len(state.profiles), self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


@dataclass
class RecurringResult:
    profile: Profile
    deposits_applied: int


def _parse_stamp(stamp: Optional[str], fallback: datetime) -> Optional[datetime]:
    """Return the stamp as an aware datetime, or None when it is not ISO-8601."""
    if not stamp:
        return fallback
    try:
        parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def process_recurring_deposits(profile: Profile, now: Optional[datetime] = None) -> RecurringResult:
    """
    Credit every whole recurring interval elapsed since the last run.

    Only savings and debt assets with a positive recurringAmount qualify; a
    debt's deposit reduces what is owed. The processed date advances by the
    credited intervals only, so partial periods carry over to the next call.
    """
    now = now or _utcnow()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    applied = 0
    assets: List[Asset] = []
    for asset in profile.assets:
        eligible = (
            asset.type in ("savings", "debt")
            and asset.isRecurring
            and asset.recurringAmount
            and asset.recurringAmount > 0
        )
        if not eligible:
            assets.append(asset)
            continue

        last = _parse_stamp(asset.lastRecurringProcessedDate, now)
        if last is None:
            logger.warning(
                "asset %s has unreadable lastRecurringProcessedDate %r, skipping",
                asset.id,
                asset.lastRecurringProcessedDate,
            )
            assets.append(asset)
            continue
        interval = RECURRING_INTERVALS.get(asset.recurringFrequency or "monthly", RECURRING_INTERVALS["monthly"])
        intervals = int((now - last) // interval)
        if intervals <= 0:
            assets.append(asset)
            continue

        applied += intervals
        assets.append(
            asset.model_copy(
                update={
                    "balance": asset.balance + intervals * asset.recurringAmount,
                    "lastRecurringProcessedDate": (last + intervals * interval).isoformat(),
                }
            )
        )

    updated = profile.model_copy(
        update={"assets": assets, "totalBalance": sum(asset.balance for asset in assets)}
    )
    if applied:
        logger.info("applied %d recurring deposits to profile %s", applied, profile.id)
    return RecurringResult(profile=updated, deposits_applied=applied)
