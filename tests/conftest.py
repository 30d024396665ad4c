"""Shared pytest fixtures for the Pokedex API tests."""

from __future__ import annotations

import itertools
from datetime import timedelta
from typing import Dict, Optional

import httpx
import pytest
import pytest_asyncio

from pokedex_api.config import Settings
from pokedex_api.database import create_engine, create_schema, create_sessionmaker
from pokedex_api.exceptions import UsernameTakenError
from pokedex_api.models import User
from pokedex_api.security import PasswordHasher, SessionIssuer

TEST_SECRET = "test-signing-secret-0123456789abcdef"


class InMemoryUserRepository:
    """Credential store double keyed by username."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._seq = itertools.count(1)

    async def find_by_username(self, username: str) -> Optional[User]:
        return self._users.get(username)

    async def insert(self, user: User) -> User:
        if user.username in self._users:
            raise UsernameTakenError()
        stored = User(
            id=next(self._seq), username=user.username, password_hash=user.password_hash
        )
        self._users[stored.username] = stored
        return stored

    def __len__(self) -> int:
        return len(self._users)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        secret_key=TEST_SECRET,
        database_url="sqlite+aiosqlite://",
        pokeapi_base_url="https://pokeapi.test/api/v2",
        seed_limit=50,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher()


@pytest.fixture
def issuer() -> SessionIssuer:
    return SessionIssuer(TEST_SECRET, expires_delta=timedelta(hours=2))


@pytest.fixture
def user_store() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest_asyncio.fixture
async def db_session():
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_engine("sqlite+aiosqlite://")
    await create_schema(engine)
    sessionmaker = create_sessionmaker(engine)
    async with sessionmaker() as session:
        yield session
    await engine.dispose()


POKEAPI_BASE = "https://pokeapi.test/api/v2"

POKEMON_DETAILS = {
    1: {"id": 1, "name": "bulbasaur", "sprites": {"front_default": "https://img.test/1.png"}},
    25: {"id": 25, "name": "pikachu", "sprites": {"front_default": "https://img.test/25.png"}},
}

ITEM_DETAILS = {
    1: {"id": 1, "name": "master-ball", "sprites": {"default": "https://img.test/master-ball.png"}},
    4: {"id": 4, "name": "poke-ball", "sprites": {"default": None}},
}


class FakePokeApi:
    """``httpx.MockTransport`` handler serving a tiny PokeAPI."""

    def __init__(self) -> None:
        self.requests: list = []
        self.fail_with: Optional[int] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)

        parts = [p for p in request.url.path.split("/") if p]
        resource = parts[2] if len(parts) > 2 else ""
        details = {"pokemon": POKEMON_DETAILS, "item": ITEM_DETAILS}.get(resource)
        if details is None:
            return httpx.Response(404)

        if len(parts) == 3:
            results = [
                {"name": d["name"], "url": f"{POKEAPI_BASE}/{resource}/{i}/"}
                for i, d in details.items()
            ]
            return httpx.Response(200, json={"count": len(results), "results": results})

        detail = details.get(int(parts[3]))
        if detail is None:
            return httpx.Response(404)
        return httpx.Response(200, json=detail)


@pytest.fixture
def fake_pokeapi() -> FakePokeApi:
    return FakePokeApi()


@pytest.fixture
def http_client(fake_pokeapi) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_pokeapi))
