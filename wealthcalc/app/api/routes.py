"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from wealthcalc.core.corpus import aggregate_corpus
from wealthcalc.core.instruments import UnknownInstrumentError, catalog_defaults, list_instruments
from wealthcalc.core.projection import compute_projection
from wealthcalc.core.tax import tax_rule_for
from wealthcalc.schemas.requests import (
    CorpusRequest,
    InstrumentCatalogResponse,
    InstrumentInfo,
    PingResponse,
    ProjectionRequest,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(UnknownInstrumentError)
def _handle_unknown_instrument(exc: UnknownInstrumentError):
    logger.warning("rejected request: %s", exc)
    return jsonify({"detail": str(exc)}), HTTPStatus.BAD_REQUEST


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong")
    return jsonify(response.model_dump())


@api_bp.get("/instruments")
def instruments() -> Any:
    """Static catalog: growth mode, default rate and tax treatment per instrument."""
    rows = []
    for spec in list_instruments():
        rule = tax_rule_for(spec.instrument)
        rows.append(
            InstrumentInfo(
                instrument=spec.instrument,
                name=spec.name,
                growthMode=spec.mode,
                defaultRate=spec.default_rate,
                compounding=spec.compounding,
                lockInYears=spec.lock_in_years,
                yearlyCap=spec.yearly_cap,
                taxPolicy=rule.policy,
                taxNotes=rule.notes,
                defaults=catalog_defaults(spec),
            )
        )
    response = InstrumentCatalogResponse(instruments=rows)
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/projection")
def projection() -> Any:
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    result = compute_projection(payload.instrument, payload.taxContext, payload.settings)
    return jsonify(result.model_dump(mode="json"))


@api_bp.post("/corpus")
def corpus() -> Any:
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = CorpusRequest.model_validate(raw_payload)
    totals = aggregate_corpus(payload.instruments, payload.taxContext, payload.settings)
    return jsonify(totals.model_dump(mode="json"))
