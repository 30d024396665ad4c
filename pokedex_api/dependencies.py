"""FastAPI dependency providers.

Long-lived collaborators (settings, session issuer, HTTP client, session
maker) live on ``app.state`` and are created by the app factory and its
lifespan; request-scoped ones (database session, repositories, services)
are built per request from them. Tests replace any of these through
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.auth_service import AuthService
from pokedex_api.catalog import ItemService, PokemonService
from pokedex_api.config import Settings
from pokedex_api.exceptions import UnauthenticatedError
from pokedex_api.pokeapi import PokeApiClient
from pokedex_api.repositories import ItemRepository, PokemonRepository, UserRepository
from pokedex_api.security import PasswordHasher, SessionIssuer

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.issuer


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_pokeapi_client(request: Request) -> PokeApiClient:
    return request.app.state.pokeapi


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an asynchronous database session for the current request."""
    async with request.app.state.sessionmaker() as session:
        yield session


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_pokemon_repository(db: AsyncSession = Depends(get_db)) -> PokemonRepository:
    return PokemonRepository(db)


def get_item_repository(db: AsyncSession = Depends(get_db)) -> ItemRepository:
    return ItemRepository(db)


def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> AuthService:
    return AuthService(users, hasher, issuer)


def get_pokemon_service(
    repo: PokemonRepository = Depends(get_pokemon_repository),
    client: PokeApiClient = Depends(get_pokeapi_client),
    settings: Settings = Depends(get_settings),
) -> PokemonService:
    return PokemonService(repo, client, settings.seed_limit)


def get_item_service(
    repo: ItemRepository = Depends(get_item_repository),
    client: PokeApiClient = Depends(get_pokeapi_client),
    settings: Settings = Depends(get_settings),
) -> ItemService:
    return ItemService(repo, client, settings.seed_limit)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> str:
    """Return the username asserted by the request's bearer token.

    Raises:
        UnauthenticatedError: If the token is missing, malformed, expired or
            not signed with the configured secret.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()
    subject = issuer.verify(credentials.credentials)
    if subject is None:
        raise UnauthenticatedError()
    return subject
