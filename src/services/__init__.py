"""Services package for identity and session logic"""

from .auth_service import AuthService, SessionClaim

__all__ = [
    "AuthService",
    "SessionClaim",
]
