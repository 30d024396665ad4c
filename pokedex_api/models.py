"""SQLAlchemy models for the Pokedex API.

``User`` backs the credential store; ``Pokemon`` and ``Item`` hold the
cached copy of PokeAPI reference data. The schema mirrors the Alembic
migrations under ``migrations/versions``.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, Integer, String

from pokedex_api.database import Base


class User(Base):
    """ORM model representing a registered user.

    Attributes
    ----------
    id:
        Integer primary key assigned by the database.
    username:
        Name used to log in; unique across the table.
    password_hash:
        Digest produced by :class:`~pokedex_api.security.PasswordHasher`,
        never the plaintext password.
    """

    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    username: str = Column(String(255), unique=True, index=True, nullable=False)
    password_hash: str = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id!r} username={self.username!r}>"


class Pokemon(Base):
    """Cached Pokémon reference record."""

    __tablename__ = "pokemons"

    id: int = Column(Integer, primary_key=True, index=True)
    poke_id: int = Column(Integer, nullable=False, index=True)
    name: str = Column(String(255), nullable=False, index=True)
    sprite_url: Optional[str] = Column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<Pokemon id={self.id!r} name={self.name!r}>"


class Item(Base):
    """Cached item reference record."""

    __tablename__ = "items"

    id: int = Column(Integer, primary_key=True, index=True)
    item_id: int = Column(Integer, nullable=False, index=True)
    name: str = Column(String(255), nullable=False, index=True)
    sprite_url: Optional[str] = Column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<Item id={self.id!r} name={self.name!r}>"
