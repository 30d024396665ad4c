"""Catalog services over the cached Pokémon and item reference data.

Reads are served from the database. ``seed_from_api`` walks the PokeAPI
listing for the resource, fetches each detail record and caches the ones
whose name is not stored yet, so running it again only adds what is new.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Protocol, Set, TypeVar

from pokedex_api.database import Base
from pokedex_api.exceptions import ReferenceDataUnavailableError
from pokedex_api.models import Item, Pokemon
from pokedex_api.pokeapi import PokeApiClient

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


class CatalogStore(Protocol[T]):
    async def get_all(self) -> List[T]: ...

    async def get_by_name(self, name: str) -> Optional[T]: ...

    async def names(self) -> Set[str]: ...

    async def add(self, record: T) -> T: ...


class CatalogService(ABC, Generic[T]):
    resource: str

    def __init__(
        self,
        repo: CatalogStore[T],
        client: Optional[PokeApiClient] = None,
        seed_limit: int = 1000,
    ) -> None:
        self._repo = repo
        self._client = client
        self._seed_limit = seed_limit

    async def list_all(self) -> List[T]:
        return await self._repo.get_all()

    async def get(self, name: str) -> Optional[T]:
        return await self._repo.get_by_name(name)

    async def seed_from_api(self) -> int:
        """Cache every listed resource not stored yet; return how many were added."""
        if self._client is None:
            raise ReferenceDataUnavailableError("No reference data provider configured")

        refs = await self._client.list_resources(self.resource, self._seed_limit)
        known = await self._repo.names()
        added = 0
        for ref in refs:
            name = ref.get("name")
            url = ref.get("url")
            if not url or name in known:
                continue
            detail = await self._client.get_resource(url)
            try:
                record = self.build_record(detail)
            except (KeyError, TypeError) as exc:
                raise ReferenceDataUnavailableError(
                    f"Malformed {self.resource} record at {url}"
                ) from exc
            await self._repo.add(record)
            known.add(record.name)
            added += 1

        logger.info(
            "Seeded %d new %s records (%d listed)", added, self.resource, len(refs)
        )
        return added

    @abstractmethod
    def build_record(self, detail: Dict[str, Any]) -> T:
        """Map a PokeAPI detail document to an unsaved record."""


def _sprite(detail: Dict[str, Any], key: str) -> Optional[str]:
    sprites = detail.get("sprites") or {}
    return sprites.get(key)


class PokemonService(CatalogService[Pokemon]):
    resource = "pokemon"

    def build_record(self, detail: Dict[str, Any]) -> Pokemon:
        return Pokemon(
            poke_id=detail["id"],
            name=detail["name"],
            sprite_url=_sprite(detail, "front_default"),
        )


class ItemService(CatalogService[Item]):
    resource = "item"

    def build_record(self, detail: Dict[str, Any]) -> Item:
        return Item(
            item_id=detail["id"],
            name=detail["name"],
            sprite_url=_sprite(detail, "default"),
        )
