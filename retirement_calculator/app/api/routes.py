"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from retirement_calculator.app.api.errors import register_error_handlers
from retirement_calculator.core.health import get_health_report
from retirement_calculator.core.service import RetirementCalculatorService
from retirement_calculator.schemas.calculator import (
    LifestyleResponse,
    RetirementCalculatorRequest,
    RetirementCalculatorResponse,
)
from retirement_calculator.utils.logging import set_lifestyle

logger = logging.getLogger(__name__)

SERVICE_EXTENSION = "retirement_calculator"

api_bp = Blueprint("calculator", __name__)
register_error_handlers(api_bp)


def _service() -> RetirementCalculatorService:
    return current_app.extensions[SERVICE_EXTENSION]


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint; DOWN while either cache sentinel is missing."""
    report = get_health_report(_service())
    status = HTTPStatus.OK if report.is_up else HTTPStatus.SERVICE_UNAVAILABLE
    return jsonify(report.model_dump()), status


@api_bp.post("/retirement")
def retirement() -> Any:
    raw_payload: Dict[str, Any] = request.get_json(silent=True) or {}
    payload = RetirementCalculatorRequest.model_validate(raw_payload)
    set_lifestyle(payload.lifestyleType)
    logger.info(
        "Received retirement calculation request for age: %s, retirement age: %s, lifestyle: %s",
        payload.currentAge,
        payload.retirementAge,
        payload.lifestyleType,
    )
    result = _service().calculate(payload.to_domain())
    response = RetirementCalculatorResponse.from_result(result)
    return jsonify(response.model_dump())


@api_bp.get("/lifestyles")
def lifestyles() -> Any:
    profiles = _service().list_lifestyles()
    return jsonify([LifestyleResponse.from_profile(profile).model_dump() for profile in profiles])


@api_bp.post("/cache/refresh")
def refresh_cache() -> Any:
    service = _service()
    loaded = service.refresh_caches()
    logger.info("Caches refreshed: %s", loaded)
    report = get_health_report(service)
    body = report.model_dump()
    body["loaded"] = loaded
    status = HTTPStatus.OK if report.is_up else HTTPStatus.SERVICE_UNAVAILABLE
    return jsonify(body), status
