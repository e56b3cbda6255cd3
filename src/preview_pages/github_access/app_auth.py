"""GitHub App authentication helpers."""

from __future__ import annotations

import time

import jwt

# GitHub rejects app tokens valid for more than ten minutes.
_JWT_LIFETIME_SECONDS = 540
_CLOCK_DRIFT_SECONDS = 60


def create_app_jwt(app_id: int, private_key: str, *, now: float | None = None) -> str:
    """Mint the RS256 JWT that authenticates requests made as the App itself."""
    issued_at = int(now if now is not None else time.time()) - _CLOCK_DRIFT_SECONDS
    payload = {
        "iat": issued_at,
        "exp": issued_at + _CLOCK_DRIFT_SECONDS + _JWT_LIFETIME_SECONDS,
        "iss": str(app_id),
    }
    return jwt.encode(payload, private_key, algorithm="RS256")
