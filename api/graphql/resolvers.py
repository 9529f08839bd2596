"""
GraphQL Resolvers and DataLoaders
==================================
Operation handlers behind the Query/Mutation fields and the nested
User/Post fields.

Features:
    - One handler per field, reading and writing through the EntityStore
    - Multi-step mutations run inside ``store.atomic()``
    - DataLoader for post authors, created per request

Responsibility: GraphQL data fetching and mutation logic
"""

from typing import Iterable, List, Optional
import logging

from strawberry.dataloader import DataLoader

from src.db.store import EntityStore
from src.exceptions import (
    AlreadyFriendError,
    PostNotFoundError,
    SelfFriendError,
    UserNotFoundError,
)
from src.models import Post, User
from src.services.auth_service import SessionClaim

logger = logging.getLogger(__name__)


def parse_id(raw_id) -> Optional[int]:
    """Convert a GraphQL ID argument into a store identity, None unless it is plain ASCII digits."""
    if not isinstance(raw_id, str) or not (raw_id.isascii() and raw_id.isdigit()):
        return None
    return int(raw_id)


# DataLoader factory functions
def get_user_loader(store: EntityStore) -> DataLoader:
    """Create DataLoader for users by ID"""

    async def load_users(ids: List[int]) -> List[Optional[User]]:
        users = store.find_users_by_ids(ids)
        user_map = {user.id: user for user in users}
        return [user_map.get(id) for id in ids]

    return DataLoader(load_fn=load_users)


# Query handlers
def get_me(store: EntityStore, me: SessionClaim) -> Optional[User]:
    """The caller's own user (None if it no longer exists)"""
    return store.find_user_by_id(me.id)


def get_users(store: EntityStore) -> List[User]:
    return store.get_all_users()


def get_user_by_name(store: EntityStore, name: str) -> Optional[User]:
    return store.find_user_by_name(name)


def get_posts(store: EntityStore) -> List[Post]:
    return store.get_all_posts()


def get_post(store: EntityStore, raw_id) -> Optional[Post]:
    post_id = parse_id(raw_id)
    if post_id is None:
        return None
    return store.find_post_by_id(post_id)


# Field handlers
def get_users_by_ids(store: EntityStore, user_ids: Iterable[int]) -> List[User]:
    """Resolve an identity list (friends, like givers) to users, in store order"""
    return store.find_users_by_ids(user_ids)


def get_posts_by_author(store: EntityStore, user_id: int) -> List[Post]:
    return store.find_posts_by_author(user_id)


# Mutation handlers
def update_my_info(
    store: EntityStore,
    me: SessionClaim,
    name: Optional[str] = None,
    age: Optional[int] = None
) -> User:
    """
    Patch the caller's name and/or age.

    Only the fields actually provided are written; omitted fields keep
    their previous value.
    """
    changes = {}
    if name is not None:
        changes["name"] = name
    if age is not None:
        changes["age"] = age

    if not changes:
        user = store.find_user_by_id(me.id)
        if user is None:
            raise UserNotFoundError(me.id)
        return user

    user = store.update_user(me.id, **changes)
    logger.info(f"User {me.id} updated {sorted(changes)}")
    return user


def add_friend(store: EntityStore, me: SessionClaim, raw_user_id) -> User:
    """
    Make the caller and ``raw_user_id`` friends on both sides.

    Both friend lists are checked before either is written, and both
    writes happen while the store lock is held.

    Returns:
        The caller, with the new friend appended
    """
    user_id = parse_id(raw_user_id)
    if user_id is None:
        raise UserNotFoundError(raw_user_id)
    if user_id == me.id:
        raise SelfFriendError()

    with store.atomic():
        caller = store.find_user_by_id(me.id)
        if caller is None:
            raise UserNotFoundError(me.id)
        friend = store.find_user_by_id(user_id)
        if friend is None:
            raise UserNotFoundError(user_id)

        if caller.is_friend_of(user_id) or friend.is_friend_of(me.id):
            raise AlreadyFriendError(user_id)

        updated_caller = store.update_user(me.id, friend_ids=caller.friend_ids + [user_id])
        store.update_user(user_id, friend_ids=friend.friend_ids + [me.id])

    logger.info(f"Users {me.id} and {user_id} are now friends")
    return updated_caller


def add_post(store: EntityStore, me: SessionClaim, title: str, body: Optional[str] = None) -> Post:
    post = store.create_post(me.id, title, body)
    logger.info(f"User {me.id} added post {post.id}")
    return post


def like_post(store: EntityStore, me: SessionClaim, raw_post_id) -> Post:
    """
    Toggle the caller's like on a post.

    The caller is added to the like list if absent and removed if present,
    so two identical calls leave the list as it was.
    """
    post_id = parse_id(raw_post_id)
    if post_id is None:
        raise PostNotFoundError(raw_post_id)

    with store.atomic():
        post = store.find_post_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        if store.find_user_by_id(me.id) is None:
            raise UserNotFoundError(me.id)

        if post.is_liked_by(me.id):
            like_giver_ids = [id for id in post.like_giver_ids if id != me.id]
            action = "unliked"
        else:
            like_giver_ids = post.like_giver_ids + [me.id]
            action = "liked"

        updated = store.update_post(post_id, like_giver_ids=like_giver_ids)

    logger.info(f"User {me.id} {action} post {post_id}")
    return updated


def delete_post(store: EntityStore, me: SessionClaim, raw_post_id) -> Post:
    """Remove a post. Ownership is enforced by the IsPostAuthor guard."""
    post_id = parse_id(raw_post_id)
    if post_id is None:
        raise PostNotFoundError(raw_post_id)

    post = store.delete_post(post_id)
    logger.info(f"User {me.id} deleted post {post_id}")
    return post
