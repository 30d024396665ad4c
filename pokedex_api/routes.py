"""HTTP routes of the Pokedex API.

- ``POST /api/auth/register`` and ``POST /api/auth/login`` return ``{token}``;
- ``GET /api/pokemons``, ``GET /api/pokemons/{name}`` and ``GET /api/items``
  read the cached reference data;
- ``POST /api/pokemons/seed`` and ``POST /api/items/seed`` resync the cache
  from PokeAPI and require a bearer token.

Errors are raised as :mod:`pokedex_api.exceptions` types and rendered by the
handler registered in :func:`pokedex_api.app.create_app`.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from pokedex_api.auth_service import AuthService
from pokedex_api.catalog import ItemService, PokemonService
from pokedex_api.dependencies import (
    get_auth_service,
    get_current_user,
    get_item_service,
    get_pokemon_service,
)
from pokedex_api.exceptions import NotFoundError
from pokedex_api.schemas import Credentials, ErrorResponse, ItemOut, PokemonOut, Token

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
pokemon_router = APIRouter(prefix="/api/pokemons", tags=["pokemons"])
item_router = APIRouter(prefix="/api/items", tags=["items"])


@auth_router.post(
    "/register",
    response_model=Token,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    credentials: Credentials, auth: AuthService = Depends(get_auth_service)
) -> Token:
    """Register a new user and return a session token for it."""
    token = await auth.register(credentials.username, credentials.password)
    return Token(token=token)


@auth_router.post(
    "/login", response_model=Token, responses={401: {"model": ErrorResponse}}
)
async def login(
    credentials: Credentials, auth: AuthService = Depends(get_auth_service)
) -> Token:
    """Authenticate a user and return a session token."""
    token = await auth.login(credentials.username, credentials.password)
    return Token(token=token)


@pokemon_router.get("", response_model=List[PokemonOut])
async def list_pokemons(
    service: PokemonService = Depends(get_pokemon_service),
) -> List[PokemonOut]:
    return [PokemonOut.model_validate(p) for p in await service.list_all()]


@pokemon_router.get(
    "/{name}", response_model=PokemonOut, responses={404: {"model": ErrorResponse}}
)
async def get_pokemon(
    name: str, service: PokemonService = Depends(get_pokemon_service)
) -> PokemonOut:
    pokemon = await service.get(name)
    if pokemon is None:
        raise NotFoundError("Pokemon not found")
    return PokemonOut.model_validate(pokemon)


@pokemon_router.post(
    "/seed",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def seed_pokemons(
    username: str = Depends(get_current_user),
    service: PokemonService = Depends(get_pokemon_service),
) -> Response:
    """Resync the cached Pokémon from PokeAPI."""
    logger.info("Pokemon seed requested by %r", username)
    await service.seed_from_api()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@item_router.get("", response_model=List[ItemOut])
async def list_items(service: ItemService = Depends(get_item_service)) -> List[ItemOut]:
    return [ItemOut.model_validate(i) for i in await service.list_all()]


@item_router.post(
    "/seed",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def seed_items(
    username: str = Depends(get_current_user),
    service: ItemService = Depends(get_item_service),
) -> Response:
    """Resync the cached items from PokeAPI."""
    logger.info("Item seed requested by %r", username)
    await service.seed_from_api()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
