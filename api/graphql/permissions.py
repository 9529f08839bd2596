"""
GraphQL Access Guards
=====================
Strawberry permission classes attached to fields through
``permission_classes``. Strawberry evaluates them in list order before the
resolver runs, so ``[IsAuthenticated, IsPostAuthor]`` reports a missing
login before any ownership check.

Responsibility: Authorization checks on the request context
"""

from typing import Any
import logging

from strawberry.permission import BasePermission
from strawberry.types import Info

from src.exceptions import NotLoggedInError, NotOwnerError, PostNotFoundError

logger = logging.getLogger(__name__)


class IsAuthenticated(BasePermission):
    """Allow only requests carrying a verified session claim."""

    message = NotLoggedInError.default_message
    error_extensions = {"code": NotLoggedInError.code}

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        if info.context.get("me") is None:
            logger.warning(f"Anonymous request denied for {info.field_name}")
            return False
        return True


class IsPostAuthor(BasePermission):
    """
    Allow only the author of the post named by the ``post_id`` argument.

    Must follow IsAuthenticated. A missing post is reported as not found
    before ownership is considered.
    """

    message = NotOwnerError.default_message
    error_extensions = {"code": NotOwnerError.code}

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        from api.graphql.resolvers import get_post

        raw_post_id = kwargs.get("post_id")
        post = get_post(info.context["store"], raw_post_id)
        if post is None:
            raise PostNotFoundError(raw_post_id)

        me = info.context["me"]
        if post.author_id != me.id:
            logger.warning(f"User {me.id} denied {info.field_name} on post {post.id}")
            return False
        return True
