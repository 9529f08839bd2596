"""
Post domain model.

Responsibility: Single post record with its like-giver list
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Post(BaseModel):
    """Post authored by a user. ``created_at`` is fixed at creation."""

    id: int = Field(ge=1, description="Store-assigned identity, never reused")
    author_id: int = Field(description="Identity of the authoring user")
    title: Optional[str] = Field(default=None, description="Post title")
    body: Optional[str] = Field(default=None, description="Post content")
    like_giver_ids: List[int] = Field(
        default_factory=list,
        description="Identities of users who like this post"
    )
    created_at: datetime = Field(default_factory=utc_now)

    def is_liked_by(self, user_id: int) -> bool:
        return user_id in self.like_giver_ids

    def created_at_iso(self) -> str:
        """Creation time as ISO-8601 (UTC, millisecond precision, ``Z`` suffix)"""
        stamp = self.created_at.astimezone(timezone.utc)
        return stamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{stamp.microsecond // 1000:03d}Z"
