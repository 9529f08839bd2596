"""
GraphQL Schema
==============
Strawberry GraphQL schema for users, posts, friendships and likes.

Responsibility: GraphQL type definitions, field wiring and access guards.
"""

from typing import List, Optional
import logging

import strawberry  # type: ignore[import]
from graphql import GraphQLError
from strawberry.types import Info  # type: ignore[import]

from api.graphql.permissions import IsAuthenticated, IsPostAuthor
from src.exceptions import SocialGraphError
from src.models import Post as PostModel
from src.models import User as UserModel

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# GraphQL Types
# --------------------------------------------------------------------------- #


@strawberry.type(description="User")
class User:
    """User GraphQL type. The password hash is not exposed."""

    id: strawberry.ID = strawberry.field(description="Identity")
    email: str = strawberry.field(description="Email")
    name: Optional[str] = strawberry.field(description="Name")
    age: Optional[int] = strawberry.field(description="Age")
    friend_ids: strawberry.Private[List[int]]

    @strawberry.field(description="friends")
    async def friends(self, info: Info) -> List["User"]:
        """Resolve the friend list to users."""
        from api.graphql.resolvers import get_users_by_ids

        users = get_users_by_ids(info.context["store"], self.friend_ids)
        return [User.from_model(user) for user in users]

    @strawberry.field(description="Post")
    async def posts(self, info: Info) -> List["Post"]:
        """Resolve posts authored by this user."""
        from api.graphql.resolvers import get_posts_by_author

        posts = get_posts_by_author(info.context["store"], int(self.id))
        return [Post.from_model(post) for post in posts]

    @classmethod
    def from_model(cls, model: UserModel) -> "User":
        """Convert store record to GraphQL type."""
        return cls(
            id=strawberry.ID(str(model.id)),
            email=model.email,
            name=model.name,
            age=model.age,
            friend_ids=list(model.friend_ids),
        )


@strawberry.type(description="Post")
class Post:
    """Post GraphQL type."""

    id: strawberry.ID = strawberry.field(description="Identity")
    title: Optional[str] = strawberry.field(description="Title")
    body: Optional[str] = strawberry.field(description="Content")
    created_at: str = strawberry.field(description="Create time (ISO format)")
    author_id: strawberry.Private[int]
    like_giver_ids: strawberry.Private[List[int]]

    @strawberry.field(description="Author")
    async def author(self, info: Info) -> Optional[User]:
        """Resolve the author; null if the user cannot be found."""
        loader = info.context["user_loader"]
        author = await loader.load(self.author_id)
        return User.from_model(author) if author else None

    @strawberry.field(description="Like Giver")
    async def like_givers(self, info: Info) -> List[User]:
        from api.graphql.resolvers import get_users_by_ids

        users = get_users_by_ids(info.context["store"], self.like_giver_ids)
        return [User.from_model(user) for user in users]

    @classmethod
    def from_model(cls, model: PostModel) -> "Post":
        return cls(
            id=strawberry.ID(str(model.id)),
            title=model.title,
            body=model.body,
            created_at=model.created_at_iso(),
            author_id=model.author_id,
            like_giver_ids=list(model.like_giver_ids),
        )


@strawberry.type
class Token:
    """Signed session token returned by login."""

    token: str


@strawberry.input
class UpdateMyInfoInput:
    name: Optional[str] = None
    age: Optional[int] = None


@strawberry.input
class AddPostInput:
    title: str
    body: Optional[str] = None


# --------------------------------------------------------------------------- #
# Query Root
# --------------------------------------------------------------------------- #


@strawberry.type
class Query:
    """GraphQL Query root."""

    @strawberry.field(description="Testing Hello World")
    def hello(self) -> str:
        return "world"

    @strawberry.field(description="Get current user", permission_classes=[IsAuthenticated])
    async def me(self, info: Info) -> Optional[User]:
        from api.graphql.resolvers import get_me

        user = get_me(info.context["store"], info.context["me"])
        return User.from_model(user) if user else None

    @strawberry.field(description="Get all users")
    async def users(self, info: Info) -> List[User]:
        from api.graphql.resolvers import get_users

        return [User.from_model(user) for user in get_users(info.context["store"])]

    @strawberry.field(description="Get specific user by name")
    async def user(self, info: Info, name: str) -> Optional[User]:
        from api.graphql.resolvers import get_user_by_name

        user = get_user_by_name(info.context["store"], name)
        return User.from_model(user) if user else None

    @strawberry.field(description="Get all post")
    async def posts(self, info: Info) -> List[Post]:
        from api.graphql.resolvers import get_posts

        return [Post.from_model(post) for post in get_posts(info.context["store"])]

    @strawberry.field(description="Get specific post by ID")
    async def post(self, info: Info, id: strawberry.ID) -> Optional[Post]:
        from api.graphql.resolvers import get_post

        post = get_post(info.context["store"], id)
        return Post.from_model(post) if post else None


# --------------------------------------------------------------------------- #
# Mutation Root
# --------------------------------------------------------------------------- #


@strawberry.type
class Mutation:
    """GraphQL Mutation root."""

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def update_my_info(self, info: Info, input: UpdateMyInfoInput) -> User:
        from api.graphql.resolvers import update_my_info

        user = update_my_info(
            info.context["store"],
            info.context["me"],
            name=input.name,
            age=input.age,
        )
        # Later fields in this request must see the new values
        info.context["user_loader"].clear(user.id)
        return User.from_model(user)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def add_friend(self, info: Info, user_id: strawberry.ID) -> User:
        from api.graphql.resolvers import add_friend

        return User.from_model(add_friend(info.context["store"], info.context["me"], user_id))

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def add_post(self, info: Info, input: AddPostInput) -> Post:
        from api.graphql.resolvers import add_post

        post = add_post(info.context["store"], info.context["me"], input.title, input.body)
        return Post.from_model(post)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def like_post(self, info: Info, post_id: strawberry.ID) -> Post:
        from api.graphql.resolvers import like_post

        return Post.from_model(like_post(info.context["store"], info.context["me"], post_id))

    @strawberry.mutation(permission_classes=[IsAuthenticated, IsPostAuthor])
    async def delete_post(self, info: Info, post_id: strawberry.ID) -> Post:
        from api.graphql.resolvers import delete_post

        return Post.from_model(delete_post(info.context["store"], info.context["me"], post_id))

    @strawberry.mutation(description="Sign up. Email and password is required")
    async def sign_up(
        self,
        info: Info,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> User:
        user = await info.context["auth"].sign_up(name, email, password)
        return User.from_model(user)

    @strawberry.mutation(description="Login")
    async def login(self, info: Info, email: str, password: str) -> Token:
        token = await info.context["auth"].login(email, password)
        return Token(token=token)


# --------------------------------------------------------------------------- #
# Schema
# --------------------------------------------------------------------------- #


class SocialGraphSchema(strawberry.Schema):
    """Schema that logs expected domain and guard failures without tracebacks."""

    def process_errors(self, errors, execution_context=None) -> None:
        unexpected = []
        for error in errors:
            original = getattr(error, "original_error", None)
            if isinstance(original, (SocialGraphError, GraphQLError)):
                logger.warning(f"GraphQL request failed: {error.message}")
            else:
                unexpected.append(error)

        if unexpected:
            super().process_errors(unexpected, execution_context)


schema = SocialGraphSchema(
    query=Query,
    mutation=Mutation,
)
