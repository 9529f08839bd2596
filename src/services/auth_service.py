"""
Identity and session service.

Turns a credential pair into a verified identity, a verified identity into
a signed session token, and an inbound token back into a session claim.

Responsibility: Sign-up, login and request authentication
"""

from dataclasses import dataclass
from typing import Optional
import asyncio
import logging

import jwt

from ..config import AuthConfig
from ..db.store import EntityStore
from ..exceptions import (
    DuplicateEmailError,
    InvalidCredentialError,
    SessionExpiredError,
    UnknownEmailError,
)
from ..models import User
from ..utils.password_utils import hash_password, verify_password
from ..utils.token_utils import create_token, decode_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionClaim:
    """Identity claim carried by a verified session token."""

    id: int
    email: str
    name: Optional[str] = None


class AuthService:
    """
    Identity & session operations over an EntityStore.

    Password hashing and verification are CPU bound and run in a worker
    thread; the duplicate-email check that matters is the one
    ``EntityStore.create_user`` performs under the store lock.

    Example:
        auth = AuthService(store, settings.auth)
        user = await auth.sign_up("Fong", "fong@test.com", "123456")
        token = await auth.login("fong@test.com", "123456")
        claim = auth.authenticate_request(token)
    """

    def __init__(self, store: EntityStore, config: AuthConfig):
        self.store = store
        self.config = config

    async def sign_up(self, name: Optional[str], email: str, password: str) -> User:
        """
        Register a new user with a hashed password.

        Raises:
            DuplicateEmailError: if the email is already registered
        """
        # Fail fast before paying for the hash
        if self.store.find_user_by_email(email) is not None:
            logger.warning("Sign-up rejected: duplicate email")
            raise DuplicateEmailError()

        hashed = await asyncio.to_thread(hash_password, password, self.config.salt_rounds)
        user = self.store.create_user(email=email, password=hashed, name=name)
        logger.info(f"Signed up user {user.id}")
        return user

    async def login(self, email: str, password: str) -> str:
        """
        Verify credentials and return a signed session token.

        Raises:
            UnknownEmailError: if no user has this email
            InvalidCredentialError: if the password does not match
        """
        user = self.store.find_user_by_email(email)
        if user is None:
            logger.warning("Login failed: unknown email")
            raise UnknownEmailError()

        is_valid = await asyncio.to_thread(verify_password, password, user.password)
        if not is_valid:
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise InvalidCredentialError()

        logger.info(f"User {user.id} logged in")
        return self.create_session_token(user)

    def create_session_token(self, user: User) -> str:
        return create_token({"id": user.id, "email": user.email, "name": user.name}, self.config)

    def authenticate_request(self, token: Optional[str]) -> Optional[SessionClaim]:
        """
        Resolve the request's session claim.

        No token means an anonymous request (``None``). A token that fails
        verification aborts the whole request rather than downgrading it.

        Raises:
            SessionExpiredError: if the token is malformed, forged or expired
        """
        if not token:
            return None

        try:
            claims = decode_token(token, self.config)
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected session token: {e}")
            raise SessionExpiredError() from e

        user_id = claims.get("id")
        email = claims.get("email")
        if not isinstance(user_id, int) or not email:
            logger.warning("Rejected session token: missing identity claims")
            raise SessionExpiredError()

        return SessionClaim(id=user_id, email=email, name=claims.get("name"))
