"""Tests for registration and login orchestration."""

from __future__ import annotations

from unittest.mock import AsyncMock

import jwt
import pytest

from pokedex_api.auth_service import AuthService
from pokedex_api.exceptions import (
    InvalidCredentialsError,
    InvalidInputError,
    UsernameTakenError,
)
from pokedex_api.models import User
from tests.conftest import TEST_SECRET


@pytest.fixture
def auth(user_store, hasher, issuer) -> AuthService:
    return AuthService(user_store, hasher, issuer)


@pytest.mark.asyncio
async def test_register_then_login_round_trip(auth, issuer, user_store):
    register_token = await auth.register("ash", "pikachu123")
    login_token = await auth.login("ash", "pikachu123")

    assert issuer.verify(register_token) == "ash"
    assert issuer.verify(login_token) == "ash"
    assert len(user_store) == 1


@pytest.mark.asyncio
async def test_register_token_has_same_claims_as_login_token(auth):
    register_claims = jwt.decode(
        await auth.register("ash", "pikachu123"), TEST_SECRET, algorithms=["HS256"]
    )
    login_claims = jwt.decode(
        await auth.login("ash", "pikachu123"), TEST_SECRET, algorithms=["HS256"]
    )

    assert set(register_claims) == set(login_claims) == {"sub", "iat", "exp"}
    assert register_claims["sub"] == login_claims["sub"] == "ash"


@pytest.mark.asyncio
async def test_register_stores_digest_not_password(auth, user_store, hasher):
    await auth.register("ash", "pikachu123")

    stored = await user_store.find_by_username("ash")
    assert stored is not None
    assert stored.id == 1
    assert stored.password_hash == hasher.hash("pikachu123")
    assert stored.password_hash != "pikachu123"


@pytest.mark.asyncio
async def test_login_with_wrong_password_fails(auth):
    await auth.register("ash", "pikachu123")

    with pytest.raises(InvalidCredentialsError):
        await auth.login("ash", "wrong")


@pytest.mark.asyncio
async def test_unknown_user_is_indistinguishable_from_wrong_password(auth):
    await auth.register("ash", "pikachu123")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await auth.login("ash", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        await auth.login("nobody", "whatever")

    assert type(wrong_password.value) is type(unknown_user.value)
    assert str(wrong_password.value) == str(unknown_user.value)
    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username, password", [("", "x"), ("ash", ""), ("   ", "x"), ("", "")]
)
async def test_register_rejects_empty_fields_without_insert(
    hasher, issuer, username, password
):
    store = AsyncMock()
    store.find_by_username.return_value = None
    auth = AuthService(store, hasher, issuer)

    with pytest.raises(InvalidInputError):
        await auth.register(username, password)

    store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_register_duplicate_username_is_rejected(auth, user_store):
    await auth.register("ash", "pikachu123")

    with pytest.raises(UsernameTakenError):
        await auth.register("ash", "another-password")

    assert len(user_store) == 1
    assert await auth.login("ash", "pikachu123")


@pytest.mark.asyncio
async def test_register_checks_existing_user_before_insert(hasher, issuer):
    store = AsyncMock()
    store.find_by_username.return_value = User(
        id=7, username="ash", password_hash=hasher.hash("pikachu123")
    )
    auth = AuthService(store, hasher, issuer)

    with pytest.raises(UsernameTakenError):
        await auth.register("ash", "pikachu123")

    store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_register_inserts_then_logs_in(hasher, issuer):
    stored = User(id=1, username="ash", password_hash=hasher.hash("pikachu123"))
    store = AsyncMock()
    store.find_by_username.side_effect = [None, stored]
    store.insert.return_value = stored
    auth = AuthService(store, hasher, issuer)

    token = await auth.register("ash", "pikachu123")

    assert issuer.verify(token) == "ash"
    store.insert.assert_awaited_once()
    inserted = store.insert.await_args.args[0]
    assert inserted.username == "ash"
    assert inserted.password_hash == hasher.hash("pikachu123")
    assert store.find_by_username.await_count == 2


@pytest.mark.asyncio
async def test_register_rejects_oversized_password_without_insert(hasher, issuer):
    store = AsyncMock()
    store.find_by_username.return_value = None
    auth = AuthService(store, hasher, issuer)

    with pytest.raises(InvalidInputError):
        await auth.register("ash", "p" * 5000)

    store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_login_with_oversized_password_fails(auth):
    await auth.register("ash", "pikachu123")

    with pytest.raises(InvalidCredentialsError):
        await auth.login("ash", "p" * 5000)
