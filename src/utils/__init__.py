"""
Utility package for the social graph API.

Provides password hashing and session token helpers.
"""

from .password_utils import hash_password, verify_password
from .token_utils import create_token, decode_token

__all__ = [
    "hash_password",
    "verify_password",
    "create_token",
    "decode_token",
]
