import jwt
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from src.config import AppConfig, AuthConfig, Settings
from src.db.store import EntityStore
from src.models import Post, User
from src.utils.password_utils import hash_password
from src.utils.token_utils import create_token

TEST_SECRET = "test-secret-key-for-the-social-graph-api"
TEST_PASSWORD = "123456"


def make_store() -> EntityStore:
    """Fong (1) and Kevin (2), not yet friends, and one post by Fong."""
    hashed = hash_password(TEST_PASSWORD, 4)
    return EntityStore(
        users=[
            User(id=1, email="fong@test.com", name="Fong", age=23, password=hashed),
            User(id=2, email="kevin@test.com", name="Kevin", age=40, password=hashed),
        ],
        posts=[
            Post(id=1, author_id=1, title="Hello World", body="This is my first post"),
        ],
    )


@pytest.fixture()
def auth_config():
    return AuthConfig(secret=TEST_SECRET, salt_rounds=4)


@pytest.fixture()
def settings(auth_config):
    return Settings(
        app=AppConfig(seed_demo_data=False, debug=False, log_level="WARNING"),
        auth=auth_config,
    )


@pytest.fixture()
def store():
    return make_store()


@pytest.fixture()
def app(settings, store):
    """A fresh FastAPI app serving the fixture store."""
    return create_app(settings, store)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def token_for(store, auth_config):
    """Signed session token for a user in the fixture store."""

    def _token(user_id: int) -> str:
        user = store.find_user_by_id(user_id)
        return create_token({"id": user.id, "email": user.email, "name": user.name}, auth_config)

    return _token


@pytest.fixture()
def graphql(client, auth_config):
    """POST a GraphQL operation, optionally with a session token header."""

    def _run(query: str, variables=None, token=None):
        headers = {auth_config.token_header: token} if token else {}
        return client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)

    return _run


@pytest.fixture()
def expired_token(auth_config):
    return jwt.encode(
        {"id": 1, "email": "fong@test.com", "name": "Fong", "iat": 1_500_000_000, "exp": 1_500_000_060},
        auth_config.secret,
        algorithm=auth_config.algorithm,
    )
