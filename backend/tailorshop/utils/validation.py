from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import RecordValidationError

M = TypeVar("M", bound=BaseModel)


def describe_validation_error(exc: ValidationError) -> str:
    """Turn a pydantic error into one readable line.

    Missing fields are grouped first ("Missing required fields: a, b") so the
    frontend can show them verbatim; anything else is listed as `field: msg`.
    """
    missing = []
    invalid = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "payload"
        if err.get("type") == "missing":
            missing.append(loc)
        else:
            invalid.append(f"{loc}: {err.get('msg')}")
    parts = []
    if missing:
        parts.append("Missing required fields: " + ", ".join(missing))
    if invalid:
        parts.append("Invalid fields: " + "; ".join(invalid))
    return ". ".join(parts) or "Invalid payload"


def parse_payload(model: Type[M], payload: Dict[str, Any] | None) -> M:
    """Validate a raw JSON body against `model`, raising RecordValidationError."""
    if payload is not None and not isinstance(payload, dict):
        raise RecordValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(payload or {})
    except ValidationError as exc:
        raise RecordValidationError(describe_validation_error(exc)) from exc
