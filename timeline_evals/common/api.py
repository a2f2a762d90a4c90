from typing import Any, Dict, Optional

from timeline_evals.common.errors import ScenarioNotFoundError


SCHEMA_VERSION = "v1"

NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"


def ok_response(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "status": "ok",
        "data": data,
    }


def error_response(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "status": "error",
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
    }


def scenario_not_found_response(exc: ScenarioNotFoundError) -> Dict[str, Any]:
    return error_response(NOT_FOUND, str(exc), {"scenario_id": exc.scenario_id})


def validation_error_response(exc: ValueError, *, source: str) -> Dict[str, Any]:
    """Envelope for a rejected payload; ``source`` names the request part that failed."""
    return error_response(
        VALIDATION_ERROR,
        str(exc),
        {"source": source, "error_type": type(exc).__name__},
    )
