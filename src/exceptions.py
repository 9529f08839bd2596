"""
Domain exceptions for the social graph API.

Every error carries a stable ``code`` which is exposed through an
``extensions`` dict. graphql-core copies ``extensions`` from the original
exception onto the reported GraphQL error, so clients receive
``{"message": ..., "extensions": {"code": ...}}``.

Responsibility: Error kinds raised by the store, services and guards
"""

from typing import Optional


class SocialGraphError(Exception):
    """Base class for all expected, caller-facing failures."""

    code = "INTERNAL_SERVER_ERROR"
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.extensions = {"code": self.code}


# MARK: - Authorization

class NotLoggedInError(SocialGraphError):
    code = "FORBIDDEN"
    default_message = "Not logged in."


class NotOwnerError(SocialGraphError):
    code = "FORBIDDEN"
    default_message = "Only Author Can Delete this Post"


# MARK: - Conflicts

class DuplicateEmailError(SocialGraphError):
    code = "CONFLICT"
    default_message = "User Email Duplicate"


class AlreadyFriendError(SocialGraphError):
    code = "CONFLICT"

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} Already Friend.")
        self.user_id = user_id


class SelfFriendError(SocialGraphError):
    code = "CONFLICT"
    default_message = "Cannot add yourself as a friend."


# MARK: - Not found

class UserNotFoundError(SocialGraphError):
    code = "NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} Not Exists")
        self.user_id = user_id


class PostNotFoundError(SocialGraphError):
    code = "NOT_FOUND"

    def __init__(self, post_id: int):
        super().__init__(f"Post {post_id} Not Exists")
        self.post_id = post_id


# MARK: - Authentication

class AuthenticationFailedError(SocialGraphError):
    """Login failure. Subclasses share one message so callers cannot probe emails."""

    code = "UNAUTHENTICATED"
    default_message = "Invalid email or password"


class UnknownEmailError(AuthenticationFailedError):
    pass


class InvalidCredentialError(AuthenticationFailedError):
    pass


class SessionExpiredError(SocialGraphError):
    code = "UNAUTHENTICATED"
    default_message = "Your session expired. Sign in again."
