"""
JWT Auth Middleware — Parses JWT from Authorization header, sets g.actor_id.

The middleware never rejects a request on its own. A missing, expired or
invalid token leaves ``g.actor_id`` as None and the service layer answers
with "Not authenticated".
"""

import logging

import jwt as pyjwt
from flask import g, request

from app.services.jwt_service import actor_id_from_token

logger = logging.getLogger(__name__)

# Paths that skip JWT auth entirely
JWT_SKIP_PREFIXES = (
    "/api/v1/health",
)


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.actor_id = None

        path = request.path
        if not path.startswith("/api/v1/"):
            return
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return

        token = auth_header[7:]  # Strip "Bearer "

        try:
            g.actor_id = actor_id_from_token(token)
        except pyjwt.ExpiredSignatureError:
            logger.info("Expired bearer token on %s %s", request.method, path)
        except pyjwt.InvalidTokenError as exc:
            logger.warning("Invalid bearer token on %s %s: %s", request.method, path, exc)
