"""Maps domain error kinds to HTTP responses."""

from __future__ import annotations

import logging
from datetime import datetime
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from retirement_calculator.core.errors import ErrorKind, RetirementCalculatorError
from retirement_calculator.schemas.calculator import ErrorResponse, FieldErrorDetail

logger = logging.getLogger(__name__)

ERROR_RESPONSES: Dict[ErrorKind, Tuple[HTTPStatus, str]] = {
    ErrorKind.VALIDATION_ERROR: (HTTPStatus.BAD_REQUEST, "Validation Error"),
    ErrorKind.INVALID_PARAMETER: (HTTPStatus.BAD_REQUEST, "Invalid Parameters"),
    ErrorKind.LIFESTYLE_NOT_FOUND: (HTTPStatus.NOT_FOUND, "Lifestyle Not Found"),
    ErrorKind.RATE_NOT_FOUND: (HTTPStatus.NOT_FOUND, "Interest Rate Not Found"),
    ErrorKind.CALCULATION_ERROR: (HTTPStatus.INTERNAL_SERVER_ERROR, "Calculation Error"),
    ErrorKind.CACHE_UNAVAILABLE: (HTTPStatus.SERVICE_UNAVAILABLE, "Service Unavailable"),
}

CACHE_UNAVAILABLE_MESSAGE = "Cache service is currently unavailable. Please try again later."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_response(
    status: HTTPStatus,
    label: str,
    message: str,
    field_errors: Optional[List[FieldErrorDetail]] = None,
):
    body = ErrorResponse(
        timestamp=datetime.now(),
        status=status.value,
        error=label,
        message=message,
        path=request.path,
        fieldErrors=field_errors,
    )
    return jsonify(body.model_dump(mode="json", exclude_none=True)), status


def field_errors_from(exc: ValidationError) -> List[FieldErrorDetail]:
    details: List[FieldErrorDetail] = []
    for error in exc.errors():
        rejected: Any = None if error.get("type") == "missing" else error.get("input")
        details.append(
            FieldErrorDetail(
                field=".".join(str(part) for part in error.get("loc", ())) or "body",
                rejectedValue=rejected,
                message=error.get("msg", "Invalid value"),
            )
        )
    return details


def register_error_handlers(blueprint: Blueprint) -> None:
    @blueprint.errorhandler(ValidationError)
    def _handle_validation_error(exc: ValidationError):
        """Convert Pydantic validation errors into field-level JSON responses."""
        logger.error("Validation error: %s", exc.error_count())
        status, label = ERROR_RESPONSES[ErrorKind.VALIDATION_ERROR]
        return error_response(status, label, "Request validation failed", field_errors_from(exc))

    @blueprint.errorhandler(RetirementCalculatorError)
    def _handle_domain_error(exc: RetirementCalculatorError):
        status, label = ERROR_RESPONSES[exc.kind]
        if exc.kind is ErrorKind.CACHE_UNAVAILABLE:
            logger.error("Cache error: %s", exc.message, exc_info=exc)
            return error_response(status, label, CACHE_UNAVAILABLE_MESSAGE)
        if exc.kind is ErrorKind.CALCULATION_ERROR:
            logger.error("Calculation error: %s", exc.message, exc_info=exc)
        else:
            logger.error("%s: %s", label, exc.message)
        return error_response(status, label, exc.message)

    @blueprint.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled exception")
        return error_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "Internal Server Error", UNEXPECTED_ERROR_MESSAGE
        )
