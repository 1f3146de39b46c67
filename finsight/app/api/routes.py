"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from finsight.core.bonds import BondSpec, value_bond
from finsight.core.debt import DebtSpec, solve_payoff
from finsight.core.errors import EngineInputError
from finsight.core.ping import get_ping_message
from finsight.core.projection import SHOCK_PRESETS, get_shock_preset, project_wealth_path
from finsight.domain.profiles import active_profile, process_recurring_deposits, replace_profile
from finsight.domain.summary import (
    debt_payoffs,
    estimate_income_tax,
    harvesting_candidates,
    health_label,
    projection_input_from_profile,
    summarize_profile,
)
from finsight.models import Profile
from finsight.schemas.insights import (
    BondInsightRequest,
    BondStrategyInsight,
    HealthInsight,
    WealthPathInsight,
    WealthPathInsightRequest,
)
from finsight.schemas.ping import PingResponse
from finsight.schemas.projection import ProfileProjectionRequest, ProjectionRequest
from finsight.services.insights import (
    InsightError,
    InsightRateLimitError,
    InsightTimeoutError,
    InsightUnavailableError,
)
from finsight.services.prompts import bond_strategy_prompt, health_audit_prompt, wealth_path_prompt

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _ext() -> Dict[str, Any]:
    return current_app.extensions["finsight"]


def _payload() -> Dict[str, Any]:
    return request.get_json(force=True, silent=False)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(EngineInputError)
def _handle_engine_input_error(exc: EngineInputError):
    return jsonify({"error": exc.errors}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(InsightError)
def _handle_insight_error(exc: InsightError):
    if isinstance(exc, InsightRateLimitError):
        status = HTTPStatus.TOO_MANY_REQUESTS
    elif isinstance(exc, InsightTimeoutError):
        status = HTTPStatus.GATEWAY_TIMEOUT
    elif isinstance(exc, InsightUnavailableError):
        status = HTTPStatus.SERVICE_UNAVAILABLE
    else:
        status = HTTPStatus.BAD_GATEWAY
    logger.warning("insight request failed: %s", exc)
    return jsonify({"error": [str(exc)]}), status


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message=get_ping_message())
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Year-by-year wealth path for an explicit ProjectionInput."""
    payload = ProjectionRequest.model_validate(_payload())
    window = payload.shockWindowYears
    if window is None:
        window = _ext()["settings"].shock_window_years
    snapshots = project_wealth_path(payload.to_input(), shock_window_years=window)
    return jsonify([snapshot.model_dump() for snapshot in snapshots])


@api_bp.get("/projection/shocks")
def shock_presets() -> Any:
    return jsonify([preset.model_dump() for preset in SHOCK_PRESETS.values()])


@api_bp.post("/bond/valuation")
def bond_valuation() -> Any:
    spec = BondSpec.model_validate(_payload())
    return jsonify(value_bond(spec).model_dump())


@api_bp.post("/debt/payoff")
def debt_payoff() -> Any:
    spec = DebtSpec.model_validate(_payload())
    return jsonify(solve_payoff(spec).model_dump())


@api_bp.get("/profile")
def get_profile() -> Any:
    state = _ext()["repository"].load()
    return jsonify(active_profile(state).model_dump())


@api_bp.put("/profile")
def put_profile() -> Any:
    """Replace (or add) a profile and make it the active one."""
    profile = Profile.model_validate(_payload())
    repository = _ext()["repository"]
    state = replace_profile(repository.load(), profile)
    state = state.model_copy(update={"activeProfileId": profile.id})
    repository.save(state)
    return jsonify(profile.model_dump())


@api_bp.get("/profile/summary")
def profile_summary() -> Any:
    profile = active_profile(_ext()["repository"].load())
    return jsonify(
        {
            "summary": summarize_profile(profile).model_dump(),
            "healthLabel": health_label(profile.healthScore) if profile.healthScore is not None else None,
            "estimatedAnnualTax": round(estimate_income_tax(profile.monthlyIncome * 12), 2),
            "harvestingCandidates": [c.model_dump() for c in harvesting_candidates(profile)],
            "debts": [d.model_dump() for d in debt_payoffs(profile)],
        }
    )


@api_bp.post("/profile/projection")
def profile_projection() -> Any:
    raw = request.get_json(silent=True) or {}
    overrides = ProfileProjectionRequest.model_validate(raw)
    profile = active_profile(_ext()["repository"].load())
    projection_input = projection_input_from_profile(
        profile,
        horizon_years=overrides.horizonYears,
        annual_inflation_pct=overrides.annualInflationPct,
        tax_drag_pct=overrides.taxDragPct,
        shock=get_shock_preset(overrides.shockPreset).shock,
    )
    snapshots = project_wealth_path(
        projection_input,
        shock_window_years=_ext()["settings"].shock_window_years,
    )
    return jsonify([snapshot.model_dump() for snapshot in snapshots])


@api_bp.post("/profile/recurring")
def apply_recurring() -> Any:
    repository = _ext()["repository"]
    state = repository.load()
    result = process_recurring_deposits(active_profile(state))
    if result.deposits_applied:
        repository.save(replace_profile(state, result.profile))
    return jsonify({"profile": result.profile.model_dump(), "depositsApplied": result.deposits_applied})


@api_bp.post("/insights/wealth-path")
async def wealth_path_insight() -> Any:
    body = WealthPathInsightRequest.model_validate(_payload())
    projection_input = body.projection.to_input()
    window = body.projection.shockWindowYears
    if window is None:
        window = _ext()["settings"].shock_window_years
    snapshots = project_wealth_path(projection_input, shock_window_years=window)
    prompt = wealth_path_prompt(projection_input, snapshots, body.projection.shock_label())
    insight = await _ext()["insights"].generate_insight(prompt, WealthPathInsight)
    return jsonify(insight.model_dump())


@api_bp.post("/insights/bond")
async def bond_insight() -> Any:
    body = BondInsightRequest.model_validate(_payload())
    valuation = value_bond(body.bond)
    profile = active_profile(_ext()["repository"].load())
    prompt = bond_strategy_prompt(profile, body.bond, valuation)
    insight = await _ext()["insights"].generate_insight(prompt, BondStrategyInsight)
    return jsonify({"valuation": valuation.model_dump(), "insight": insight.model_dump()})


@api_bp.post("/insights/health")
async def health_insight() -> Any:
    profile = active_profile(_ext()["repository"].load())
    insight = await _ext()["insights"].generate_insight(health_audit_prompt(profile), HealthInsight)
    return jsonify({"insight": insight.model_dump(), "label": health_label(insight.score)})
