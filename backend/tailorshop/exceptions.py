"""Domain-specific exceptions for store, service and orchestration layers.

The app registers handlers in `main.py` that translate these into
`{"success": false, "error": ...}` responses with the listed status codes.
"""
from __future__ import annotations


class RecordValidationError(Exception):
    """Required field missing or malformed on create/update (maps to HTTP 400)."""


class NotFoundError(Exception):
    """Bill, workflow job or setting does not exist (maps to HTTP 404)."""


class StageTransitionError(Exception):
    """Requested stage change is not a single step along the pipeline (maps to HTTP 409)."""


class StoreUnavailableError(Exception):
    """Document store cannot be reached or rejected the call (maps to HTTP 503)."""
