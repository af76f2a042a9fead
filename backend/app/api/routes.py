"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from backend.core.money import parse_amount
from backend.core.projection import MAX_PERIODS, ProjectionValidationError, compute
from backend.schemas.health import PingResponse
from backend.schemas.projection import ProjectionInput
from backend.schemas.rates import CurrencyQuery
from backend.services.rates import UnsupportedCurrencyError, convert_result

api_bp = Blueprint("api", __name__)

_DATE_FIELDS = {"startDate"}


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(ProjectionValidationError)
def _handle_projection_error(exc: ProjectionValidationError):
    """Report every offending field so the form can flag them all."""
    current_app.logger.info("rejected projection input: %s", exc)
    return jsonify({"detail": exc.errors}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(UnsupportedCurrencyError)
def _handle_currency_error(exc: UnsupportedCurrencyError):
    return jsonify({"detail": [{"field": "currency", "message": str(exc)}]}), HTTPStatus.BAD_REQUEST


def _rate_provider():
    return current_app.extensions["rate_provider"]


def _form_payload() -> Dict[str, Any]:
    """Map form text fields onto projection input; blank amounts count as 0."""
    payload: Dict[str, Any] = {}
    for name in ProjectionInput.model_fields:
        if name not in request.form:
            continue
        value = request.form[name]
        if name in _DATE_FIELDS:
            payload[name] = value.strip() or None
        else:
            payload[name] = parse_amount(value)
    return payload


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(
        message="pong",
        maxPeriods=MAX_PERIODS,
        rateBase=current_app.config["RATES_BASE_CURRENCY"],
    )
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Run the savings projection; ?currency=&display= converts the result."""
    query = CurrencyQuery.model_validate(request.args.to_dict())
    if request.is_json:
        payload = request.get_json(force=True, silent=False)
    else:
        payload = _form_payload()

    result = compute(payload)

    if query.display:
        currency = query.currency or current_app.config["RATES_BASE_CURRENCY"]
        table = _rate_provider().get_rates(current_app.config["RATES_BASE_CURRENCY"])
        result = convert_result(result, currency, query.display, table)

    return jsonify(result.model_dump(mode="json"))


@api_bp.get("/rates")
def rates() -> Any:
    """Current exchange-rate table, live or fallback."""
    query = CurrencyQuery.model_validate(request.args.to_dict())
    base = query.base or current_app.config["RATES_BASE_CURRENCY"]
    table = _rate_provider().get_rates(base)
    return jsonify(table.model_dump(mode="json"))
