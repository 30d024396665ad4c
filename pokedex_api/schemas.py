"""Pydantic schemas for request and response models used by the Pokedex API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    """Username/password pair accepted by ``register`` and ``login``.

    Emptiness is checked by the auth service, not here, so that an empty
    field surfaces as ``invalid_input`` rather than a validation error.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )

    username: str
    password: str


class Token(BaseModel):
    """Schema returned after successful registration or login."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    token: str


class PokemonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    poke_id: int
    name: str
    sprite_url: Optional[str] = None


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    name: str
    sprite_url: Optional[str] = None


class ErrorResponse(BaseModel):
    """Body rendered for every :class:`~pokedex_api.exceptions.PokedexError`."""

    error: str
    detail: str
