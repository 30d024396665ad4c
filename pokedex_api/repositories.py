"""Repositories over the async SQLAlchemy session.

``SQLAlchemyRepository`` implements generic CRUD for the cached
reference-data tables once and is bound to a concrete model by
``PokemonRepository`` and ``ItemRepository``.
``UserRepository`` is the credential store: lookup by username and insert.

Driver errors are translated into :mod:`pokedex_api.exceptions` types so the
API boundary never sees SQLAlchemy exceptions.
"""

from __future__ import annotations

import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.database import Base
from pokedex_api.exceptions import StorageUnavailableError, UsernameTakenError
from pokedex_api.models import Item, Pokemon, User

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


class SQLAlchemyRepository(Generic[T]):
    """CRUD operations for one mapped model."""

    model: Type[T]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_all(self) -> List[T]:
        stmt = select(self.model).order_by(self.model.id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc
        return list(result.scalars().all())

    async def get_by_id(self, record_id: int) -> Optional[T]:
        try:
            return await self._session.get(self.model, record_id)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    async def add(self, record: T) -> T:
        self._session.add(record)
        await self._commit()
        return record

    async def update(self, record_id: int, record: T) -> Optional[T]:
        """Replace the stored row ``record_id`` with the columns of ``record``."""
        existing = await self.get_by_id(record_id)
        if existing is None:
            return None
        for column in self.model.__table__.columns:
            if column.primary_key:
                continue
            setattr(existing, column.key, getattr(record, column.key))
        await self._commit()
        return existing

    async def delete(self, record_id: int) -> bool:
        existing = await self.get_by_id(record_id)
        if existing is None:
            return False
        await self._session.delete(existing)
        await self._commit()
        return True

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StorageUnavailableError() from exc


class NamedRecordRepository(SQLAlchemyRepository[T]):
    """Repository for reference records addressed by their PokeAPI name."""

    async def get_by_name(self, name: str) -> Optional[T]:
        stmt = select(self.model).where(self.model.name == name).limit(1)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc
        return result.scalars().first()

    async def names(self) -> set:
        try:
            result = await self._session.execute(select(self.model.name))
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc
        return set(result.scalars().all())


class PokemonRepository(NamedRecordRepository[Pokemon]):
    model = Pokemon


class ItemRepository(NamedRecordRepository[Item]):
    model = Item


class UserRepository:
    """Credential store: one record per registered username."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        """Return the user named ``username`` or ``None`` when absent."""
        stmt = select(User).where(User.username == username).limit(1)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc
        return result.scalars().first()

    async def insert(self, user: User) -> User:
        """Persist ``user`` and return it with its store-assigned id.

        The unique index on ``username`` turns a concurrent duplicate
        registration into :class:`UsernameTakenError`.
        """
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Rejected duplicate username %r", user.username)
            raise UsernameTakenError() from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StorageUnavailableError() from exc
        return user
