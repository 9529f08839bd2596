"""Utility helpers for signing and verifying session tokens (JWT)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from ..config import AuthConfig


def create_token(claims: Dict[str, Any], config: AuthConfig) -> str:
    """Sign ``claims`` with an ``iat``/``exp`` window of ``config.token_ttl_seconds``."""
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(seconds=config.token_ttl_seconds),
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def decode_token(token: str, config: AuthConfig) -> Dict[str, Any]:
    """
    Verify signature and expiry of ``token`` and return its claims.

    Raises:
        jwt.InvalidTokenError: on a bad signature, malformed token or expiry
    """
    return jwt.decode(
        token,
        config.secret,
        algorithms=[config.algorithm],
        options={"require": ["exp", "iat"]},
    )
