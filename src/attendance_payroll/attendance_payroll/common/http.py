"""JSON helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from flask import current_app, jsonify

from ..core.exceptions import (
    DomainError,
    LocationDeniedError,
    MissingConfigurationError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_json(value):
    """Turn dataclasses/Decimals/dates into JSON-friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        return {k: to_json(v) for k, v in asdict(value).items()}
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def status_for(exc: DomainError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, LocationDeniedError):
        return 403
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, MissingConfigurationError):
        return 422
    return 400


def error_response(exc: DomainError):
    body = {"message": str(exc)}
    if isinstance(exc, LocationDeniedError):
        body["reason"] = exc.reason.value
        if exc.distance_m is not None:
            body["distance"] = round(exc.distance_m, 2)
    return jsonify(body), status_for(exc)


def server_error(exc: Exception, message: str = "Server error"):
    logger.exception("%s", message)
    body = {"message": message}
    if bool(current_app.config.get("DEBUG", False)):
        body["error"] = str(exc)
    return jsonify(body), 500
