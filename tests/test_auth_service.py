import asyncio

import pytest

from src.exceptions import (
    DuplicateEmailError,
    InvalidCredentialError,
    SessionExpiredError,
    UnknownEmailError,
)
from src.services.auth_service import AuthService, SessionClaim
from src.utils.password_utils import hash_password, verify_password
from src.utils.token_utils import decode_token


@pytest.fixture()
def auth(store, auth_config):
    return AuthService(store, auth_config)


def test_hash_password_round_trip() -> None:
    hashed = hash_password("s3cret", 4)

    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_rejects_non_bcrypt_value() -> None:
    assert not verify_password("s3cret", "not-a-hash")


def test_sign_up_stores_hashed_password(auth, store) -> None:
    user = asyncio.run(auth.sign_up("Mary", "mary@test.com", "mary-pass"))

    stored = store.find_user_by_id(user.id)
    assert stored.name == "Mary"
    assert stored.password != "mary-pass"
    assert verify_password("mary-pass", stored.password)


def test_sign_up_duplicate_email_fails(auth) -> None:
    with pytest.raises(DuplicateEmailError):
        asyncio.run(auth.sign_up("Another Fong", "fong@test.com", "whatever"))


def test_login_after_sign_up_yields_token_for_same_identity(auth, auth_config) -> None:
    user = asyncio.run(auth.sign_up(None, "mary@test.com", "mary-pass"))
    token = asyncio.run(auth.login("mary@test.com", "mary-pass"))

    claims = decode_token(token, auth_config)
    assert claims["id"] == user.id
    assert claims["email"] == "mary@test.com"
    assert claims["exp"] - claims["iat"] == auth_config.token_ttl_seconds


def test_login_unknown_email(auth) -> None:
    with pytest.raises(UnknownEmailError):
        asyncio.run(auth.login("nobody@test.com", "123456"))


def test_login_wrong_password(auth) -> None:
    with pytest.raises(InvalidCredentialError):
        asyncio.run(auth.login("fong@test.com", "wrong"))


def test_login_failures_share_one_message() -> None:
    assert str(UnknownEmailError()) == str(InvalidCredentialError())


def test_authenticate_request_without_token_is_anonymous(auth) -> None:
    assert auth.authenticate_request(None) is None
    assert auth.authenticate_request("") is None


def test_authenticate_request_returns_claim(auth, store) -> None:
    token = auth.create_session_token(store.find_user_by_id(2))

    assert auth.authenticate_request(token) == SessionClaim(id=2, email="kevin@test.com", name="Kevin")


def test_authenticate_request_rejects_garbage(auth) -> None:
    with pytest.raises(SessionExpiredError):
        auth.authenticate_request("not-a-jwt")


def test_authenticate_request_rejects_expired_token(auth, expired_token) -> None:
    with pytest.raises(SessionExpiredError):
        auth.authenticate_request(expired_token)


def test_authenticate_request_rejects_foreign_signature(store, auth_config) -> None:
    other = AuthService(store, auth_config.model_copy(update={"secret": "another-secret-key-entirely-different"}))
    token = other.create_session_token(store.find_user_by_id(1))

    with pytest.raises(SessionExpiredError):
        AuthService(store, auth_config).authenticate_request(token)
