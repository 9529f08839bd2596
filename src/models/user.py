"""
User domain model.

Represents a member of the social graph as held by the entity store.

Responsibility: Single user record, including its hashed credential
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """
    User record.

    ``password`` holds the bcrypt hash and never leaves the server: the
    GraphQL ``User`` type does not expose it.
    """

    # MARK: - Identity
    id: int = Field(ge=1, description="Store-assigned identity, never reused")
    email: str = Field(description="Login email, unique across users")

    # MARK: - Profile
    name: Optional[str] = Field(default=None, description="Display name")
    age: Optional[int] = Field(default=None, description="Age in years")

    # MARK: - Credentials & relations
    password: str = Field(description="bcrypt hash of the user's password")
    friend_ids: List[int] = Field(
        default_factory=list,
        description="Identities of reciprocal friends, in the order they were added"
    )

    def is_friend_of(self, user_id: int) -> bool:
        """Check whether ``user_id`` is already in this user's friend list"""
        return user_id in self.friend_ids
