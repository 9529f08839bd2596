"""Utility helpers for hashing and verifying user passwords.

Passwords are stored as bcrypt hashes; the cost factor comes from
``AuthConfig.salt_rounds``.
"""

from __future__ import annotations

import bcrypt


def hash_password(plaintext: str, rounds: int) -> str:
    """Produce a salted bcrypt hash for ``plaintext``."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    """Compare ``plaintext`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
