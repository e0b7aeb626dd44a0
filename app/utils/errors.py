"""JSON error bodies and ActionResult rendering for the blueprints.

Every failure leaves the API as ``{"error": <message>, "code": <ERR_*>}``
(plus ``details`` for field-level validation problems). The message is the
service's caller-facing string, unchanged.

    from app.utils.errors import E, api_error, result_response

    return api_error(E.NOT_FOUND, "Submittal not found")
    return result_response(submittal_service.create_submittal(...), created=True)
"""

from __future__ import annotations

from flask import jsonify


# ── Error codes ───────────────────────────────────────────────────────
class E:
    """Machine-readable error codes carried by ActionResult failures."""

    # Identity
    AUTH_REQUIRED = "ERR_AUTH_REQUIRED"
    PROFILE_MISSING = "ERR_PROFILE_MISSING"

    # Input
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"

    # Lookup / uniqueness
    NOT_FOUND = "ERR_NOT_FOUND"
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"

    # Authorization
    NOT_A_MEMBER = "ERR_NOT_A_MEMBER"
    FORBIDDEN = "ERR_FORBIDDEN"

    # Server side
    DATABASE = "ERR_DATABASE"
    INTERNAL = "ERR_INTERNAL"


# ── Code → HTTP status ────────────────────────────────────────────────
_HTTP_STATUS: dict[str, int] = {
    E.AUTH_REQUIRED: 401,
    E.PROFILE_MISSING: 403,
    E.VALIDATION_INVALID: 422,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
    E.NOT_A_MEMBER: 403,
    E.FORBIDDEN: 403,
    E.DATABASE: 500,
    E.INTERNAL: 500,
}


def status_for(code: str | None) -> int:
    """HTTP status for an error code; unknown codes map to 400."""
    return _HTTP_STATUS.get(code, 400)


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """Build ``(jsonify(body), status)`` for a failure.

    *status* overrides the code's default mapping. *details* is only
    included when non-empty.
    """
    payload: dict = {"error": message, "code": code}
    if details:
        payload["details"] = details
    return jsonify(payload), status or status_for(code)


def result_response(result, *, created: bool = False):
    """Render an ``ActionResult`` as a Flask response tuple.

    Success → ``{"success": true, "data": ...}`` with 200 (201 if *created*).
    Failure → ``api_error(result.code, result.error)``.

    Entities are rendered with ``to_dict()``, lists element-wise; plain
    values and ``None`` pass through.
    """
    if not result.success:
        return api_error(result.code or E.INTERNAL, result.error, details=result.details)

    def _one(obj):
        if obj is None or isinstance(obj, (dict, str, int, float, bool)):
            return obj
        return obj.to_dict()

    data = result.data
    payload = [_one(item) for item in data] if isinstance(data, list) else _one(data)
    return jsonify({"success": True, "data": payload}), 201 if created else 200
