"""
Models package for the social graph API.

Pydantic records held by the entity store.
"""

from .post import Post
from .user import User

__all__ = [
    "Post",
    "User",
]
