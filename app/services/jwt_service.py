"""
JWT Service — access token generation and verification.

The identity provider is external; this module only issues tokens for
dev tooling and tests, and verifies bearer tokens on incoming requests.

Access token:  60 minutes (configurable via JWT_ACCESS_TOKEN_MINUTES)
Algorithm:     HS256

Token payload:
{
    "sub": "<profile_id>",
    "type": "access",
    "iat": <issued_at>,
    "exp": <expires_at>,
    "jti": <unique_id>
}
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

DEFAULT_ACCESS_MINUTES = 60
ALGORITHM = "HS256"


def _get_secret():
    """Get the JWT secret key from app config."""
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def _get_access_minutes():
    return current_app.config.get("JWT_ACCESS_TOKEN_MINUTES", DEFAULT_ACCESS_MINUTES)


def generate_access_token(profile_id: int) -> str:
    """Generate an access token whose subject is the profile id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(profile_id),
        "type": "access",
        "iat": now,
        "exp": now + timedelta(minutes=_get_access_minutes()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access token.

    Raises jwt.exceptions on failure (ExpiredSignatureError, InvalidTokenError, ...).
    """
    payload = jwt.decode(token, _get_secret(), algorithms=[ALGORITHM])
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError(f"Expected access token, got {payload.get('type')}")
    return payload


def actor_id_from_token(token: str) -> int:
    """Profile id carried by a verified access token."""
    payload = decode_access_token(token)
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise jwt.InvalidTokenError("Token subject is not a profile id") from None
