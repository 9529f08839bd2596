"""
GraphQL request context.

Builds the per-request context handed to every resolver: the session
claim (or None for anonymous requests) plus handles to the entity store
and auth service that ``create_app`` placed on ``app.state``.
"""

from typing import Any, Dict

from fastapi import Request

from api.graphql.resolvers import get_user_loader


async def get_context(request: Request) -> Dict[str, Any]:
    """
    Context for GraphQL requests.

    Raises:
        SessionExpiredError: if a token header is present but invalid;
            the whole request fails instead of running anonymously
    """
    store = request.app.state.store
    auth = request.app.state.auth_service

    token = request.headers.get(auth.config.token_header)
    me = auth.authenticate_request(token)

    return {
        "store": store,
        "auth": auth,
        "me": me,
        "user_loader": get_user_loader(store),
    }
