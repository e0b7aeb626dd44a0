"""
RailCommand
Request identity helpers and API request hygiene.

Provides:
    - current_actor_id(): the profile id resolved by the JWT middleware
    - CSRF protection for state-changing requests (non-GET/HEAD/OPTIONS)

Authorization itself lives in the service layer
(``app.services.permission_service``); blueprints only pass the actor id
through.
"""

import logging

from flask import g, jsonify, request

logger = logging.getLogger(__name__)


def current_actor_id() -> int | None:
    """Authenticated profile id for this request, or None."""
    return getattr(g, "actor_id", None)


# ── CSRF protection for API ──────────────────────────────────────────────────

def _check_content_type():
    """
    For state-changing requests (POST/PUT/PATCH/DELETE), require
    Content-Type: application/json. HTML forms cannot send that content
    type, so this doubles as a lightweight CSRF mitigation.
    """
    if request.method in ("POST", "PUT", "PATCH", "DELETE"):
        ct = request.content_type or ""
        if "application/json" not in ct and request.content_length and request.content_length > 0:
            return jsonify({
                "error": "Content-Type must be application/json for state-changing requests"
            }), 415
    return None


def init_auth(app):
    """Install the API request hygiene hook (runs after the JWT middleware)."""

    @app.before_request
    def _before_request_auth():
        if not request.path.startswith("/api/v1/"):
            return None
        if request.method == "OPTIONS":
            return None
        return _check_content_type()

    logger.debug("Auth request hooks installed")
