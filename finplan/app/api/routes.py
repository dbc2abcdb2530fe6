"""HTTP routes for the Flask API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict, Type, TypeVar

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ValidationError
from werkzeug.exceptions import BadRequest

from finplan.config import Settings
from finplan.core.goals import calculate_goal
from finplan.core.projection import (
    calculate_projection,
    compare_interest_scenarios,
    has_lapsed,
)
from finplan.schemas.goals import EducationRequest, ProtectionRequest, RetirementRequest
from finplan.schemas.projection import (
    DEFAULT_PROJECTION_CONFIG,
    ProjectionRequest,
    ProjectionResponse,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    # include_context=False keeps the payload JSON-serialisable
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.errorhandler(BadRequest)
def _handle_bad_request(exc: BadRequest):
    return jsonify({"detail": exc.description}), HTTPStatus.BAD_REQUEST


def _settings() -> Settings:
    return current_app.config.get("FINPLAN_SETTINGS") or Settings()


def _parse(model: Type[RequestT]) -> RequestT:
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    if not isinstance(raw_payload, dict):
        raise BadRequest("request body must be a JSON object")
    return model.model_validate(raw_payload)


def _plan_response(payload: BaseModel) -> Any:
    result = calculate_goal(payload, _settings())
    logger.info(
        "goal=%s required=%.0f shortfall=%.0f",
        result.goalType.value,
        result.requiredAmount,
        result.shortfall,
    )
    return jsonify(result.model_dump(mode="json"))


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify({"message": "pong"})


@api_bp.post("/goals/retirement")
def retirement_goal() -> Any:
    return _plan_response(_parse(RetirementRequest))


@api_bp.post("/goals/education")
def education_goal() -> Any:
    return _plan_response(_parse(EducationRequest))


@api_bp.post("/goals/protection")
def protection_goal() -> Any:
    return _plan_response(_parse(ProtectionRequest))


@api_bp.post("/projection")
def projection() -> Any:
    """Yearly cash-value table for one credited rate."""
    payload = _parse(ProjectionRequest)
    config = payload.config or DEFAULT_PROJECTION_CONFIG
    interest_rate = (
        payload.interestRate
        if payload.interestRate is not None
        else config.defaultInterestRate
    )

    rows = calculate_projection(
        current_age=payload.currentAge,
        annual_premium=payload.annualPremium,
        sum_assured=payload.sumAssured,
        payment_term=payload.paymentTerm,
        interest_rate=interest_rate,
        config=config,
    )
    response = ProjectionResponse(rows=rows, lapsed=has_lapsed(rows))
    logger.info("projection years=%s lapsed=%s", len(rows), response.lapsed)
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/projection/scenarios")
def projection_scenarios() -> Any:
    """Same policy at the standard and high illustration rates."""
    payload = _parse(ProjectionRequest)
    comparison = compare_interest_scenarios(
        current_age=payload.currentAge,
        annual_premium=payload.annualPremium,
        sum_assured=payload.sumAssured,
        payment_term=payload.paymentTerm,
        config=payload.config,
    )
    return jsonify(comparison.model_dump(mode="json"))
