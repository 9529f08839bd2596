"""
In-memory entity store.

Holds the two collections (users, posts) and is the only component that
mutates them. Every read and write runs under one re-entrant lock, and
``atomic()`` lets callers group several operations into a single
uninterrupted sequence.

Responsibility: Own and guard the users and posts collections
"""

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional
import logging
import threading

from ..exceptions import DuplicateEmailError, PostNotFoundError, UserNotFoundError
from ..models import Post, User
from ..models.post import utc_now

logger = logging.getLogger(__name__)

# Fields each update_* call may merge; anything else is a programming error
USER_UPDATABLE_FIELDS = frozenset({"name", "age", "friend_ids"})
POST_UPDATABLE_FIELDS = frozenset({"title", "body", "like_giver_ids"})


class EntityStore:
    """
    In-memory store for users and posts.

    Records are returned as deep copies, so callers only ever hold
    identities and snapshots, never live references into the store.
    Updates use PATCH semantics: fields not passed keep their value.

    Example:
        store = EntityStore()
        fong = store.create_user(email="fong@test.com", password=hashed, name="Fong")
        post = store.create_post(fong.id, "Hello World", "From Fong")

        with store.atomic():
            post = store.find_post_by_id(post.id)
            store.update_post(post.id, like_giver_ids=post.like_giver_ids + [fong.id])
    """

    def __init__(
        self,
        users: Optional[Iterable[User]] = None,
        posts: Optional[Iterable[Post]] = None
    ):
        self._lock = threading.RLock()
        self._users: Dict[int, User] = {}
        self._posts: Dict[int, Post] = {}

        for user in users or []:
            if self._email_taken(user.email):
                raise DuplicateEmailError()
            self._users[user.id] = user.model_copy(deep=True)
        for post in posts or []:
            if post.author_id not in self._users:
                raise UserNotFoundError(post.author_id)
            self._posts[post.id] = post.model_copy(deep=True)

        # Counters live apart from the collections so deleted ids are never reused
        self._last_user_id = max(self._users, default=0)
        self._last_post_id = max(self._posts, default=0)

    @contextmanager
    def atomic(self) -> Iterator["EntityStore"]:
        """Hold the store lock across several operations."""
        with self._lock:
            yield self

    # MARK: - User reads

    def get_all_users(self) -> List[User]:
        with self._lock:
            return [user.model_copy(deep=True) for user in self._users.values()]

    def find_user_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def find_user_by_name(self, name: str) -> Optional[User]:
        """First user with this display name, by insertion order."""
        with self._lock:
            for user in self._users.values():
                if user.name == name:
                    return user.model_copy(deep=True)
            return None

    def find_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy(deep=True)
            return None

    def find_users_by_ids(self, user_ids: Iterable[int]) -> List[User]:
        """Users whose identity is in ``user_ids``, in store order (not input order)."""
        wanted = set(user_ids)
        with self._lock:
            return [
                user.model_copy(deep=True)
                for user in self._users.values()
                if user.id in wanted
            ]

    # MARK: - Post reads

    def get_all_posts(self) -> List[Post]:
        with self._lock:
            return [post.model_copy(deep=True) for post in self._posts.values()]

    def find_post_by_id(self, post_id: int) -> Optional[Post]:
        with self._lock:
            post = self._posts.get(post_id)
            return post.model_copy(deep=True) if post else None

    def find_posts_by_author(self, user_id: int) -> List[Post]:
        with self._lock:
            return [
                post.model_copy(deep=True)
                for post in self._posts.values()
                if post.author_id == user_id
            ]

    # MARK: - Mutations

    def create_user(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        age: Optional[int] = None
    ) -> User:
        """
        Insert a new user.

        Args:
            email: Login email, must not be in use
            password: Already-hashed credential
            name: Optional display name
            age: Optional age

        Returns:
            Snapshot of the created user

        Raises:
            DuplicateEmailError: if the email is already registered
        """
        with self._lock:
            if self._email_taken(email):
                raise DuplicateEmailError()

            self._last_user_id += 1
            user = User(
                id=self._last_user_id,
                email=email,
                name=name,
                age=age,
                password=password,
                friend_ids=[],
            )
            self._users[user.id] = user
            logger.info(f"Created user {user.id}")
            return user.model_copy(deep=True)

    def create_post(self, author_id: int, title: Optional[str], body: Optional[str] = None) -> Post:
        """
        Insert a new post with an empty like list.

        Raises:
            UserNotFoundError: if ``author_id`` does not reference a user
        """
        with self._lock:
            if author_id not in self._users:
                raise UserNotFoundError(author_id)

            self._last_post_id += 1
            post = Post(
                id=self._last_post_id,
                author_id=author_id,
                title=title,
                body=body,
                like_giver_ids=[],
                created_at=utc_now(),
            )
            self._posts[post.id] = post
            logger.info(f"Created post {post.id} by user {author_id}")
            return post.model_copy(deep=True)

    def update_user(self, user_id: int, **fields) -> User:
        """
        Merge ``fields`` (name, age, friend_ids) into the user.

        Raises:
            UserNotFoundError: if no user has this identity
        """
        self._check_fields(fields, USER_UPDATABLE_FIELDS)
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            updated = user.model_copy(update=_copy_values(fields), deep=True)
            self._users[user_id] = updated
            return updated.model_copy(deep=True)

    def update_post(self, post_id: int, **fields) -> Post:
        """
        Merge ``fields`` (title, body, like_giver_ids) into the post.

        Raises:
            PostNotFoundError: if no post has this identity
        """
        self._check_fields(fields, POST_UPDATABLE_FIELDS)
        with self._lock:
            post = self._posts.get(post_id)
            if post is None:
                raise PostNotFoundError(post_id)

            updated = post.model_copy(update=_copy_values(fields), deep=True)
            self._posts[post_id] = updated
            return updated.model_copy(deep=True)

    def delete_post(self, post_id: int) -> Post:
        """
        Remove a post and return it.

        Raises:
            PostNotFoundError: if no post has this identity
        """
        with self._lock:
            post = self._posts.pop(post_id, None)
            if post is None:
                raise PostNotFoundError(post_id)
            logger.info(f"Deleted post {post_id}")
            return post

    # MARK: - Helpers

    def _email_taken(self, email: str) -> bool:
        return any(user.email == email for user in self._users.values())

    @staticmethod
    def _check_fields(fields: dict, allowed: frozenset) -> None:
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")


def _copy_values(fields: dict) -> dict:
    # Lists passed in by callers must not become aliases inside the store
    return {key: list(value) if isinstance(value, list) else value for key, value in fields.items()}
