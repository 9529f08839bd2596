"""
Demo data for local development.

Three users with reciprocal friendships and two posts. Every demo user
logs in with the password ``123456``.

Responsibility: Build a pre-populated EntityStore
"""

from datetime import datetime, timezone
import logging

from ..models import Post, User
from ..utils.password_utils import hash_password
from .store import EntityStore

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "123456"


def build_demo_store(salt_rounds: int) -> EntityStore:
    """Create a store holding the demo users and posts."""
    hashed = hash_password(DEMO_PASSWORD, salt_rounds)

    users = [
        User(id=1, email="fong@test.com", name="Fong", age=23, password=hashed, friend_ids=[2, 3]),
        User(id=2, email="kevin@test.com", name="Kevin", age=40, password=hashed, friend_ids=[1]),
        User(id=3, email="mary@test.com", name="Mary", age=18, password=hashed, friend_ids=[1]),
    ]
    posts = [
        Post(
            id=1,
            author_id=1,
            title="Hello World",
            body="This is my first post",
            like_giver_ids=[2],
            created_at=datetime(2018, 10, 10, tzinfo=timezone.utc),
        ),
        Post(
            id=2,
            author_id=2,
            title="Nice Day",
            body="Hello My Friend!",
            like_giver_ids=[1, 3],
            created_at=datetime(2018, 10, 11, tzinfo=timezone.utc),
        ),
    ]

    logger.info(f"Seeding demo data: {len(users)} users, {len(posts)} posts")
    return EntityStore(users=users, posts=posts)
