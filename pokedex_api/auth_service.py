"""Registration and login orchestration.

:class:`AuthService` combines the credential store, the password hasher and
the session issuer. Both operations return a session token:

- ``register`` validates input, rejects taken usernames, stores the digest
  and then performs a full ``login`` with the same credentials;
- ``login`` looks the user up, compares digests and issues a token.

Unknown usernames and wrong passwords raise the same
:class:`~pokedex_api.exceptions.InvalidCredentialsError` so callers cannot
tell which usernames exist.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from pokedex_api.exceptions import (
    InvalidCredentialsError,
    InvalidInputError,
    UsernameTakenError,
)
from pokedex_api.models import User
from pokedex_api.security import PasswordHasher, SessionIssuer

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    async def find_by_username(self, username: str) -> Optional[User]: ...

    async def insert(self, user: User) -> User: ...


class AuthService:
    def __init__(
        self,
        users: CredentialStore,
        hasher: PasswordHasher,
        issuer: SessionIssuer,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._issuer = issuer

    async def register(self, username: str, password: str) -> str:
        """Create an account and return a session token for it.

        Raises:
            InvalidInputError: If ``username`` or ``password`` is empty, or
                the password is too long to hash.
            UsernameTakenError: If the username is already registered.
        """
        username = (username or "").strip()
        if not username or not password:
            raise InvalidInputError()

        if await self._users.find_by_username(username) is not None:
            raise UsernameTakenError()

        digest = self._hasher.hash(password)
        user = await self._users.insert(User(username=username, password_hash=digest))
        logger.info("Registered user %r (id=%s)", user.username, user.id)

        return await self.login(username, password)

    async def login(self, username: str, password: str) -> str:
        """Verify credentials and return a session token.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password
                does not match.
        """
        username = (username or "").strip()
        user = await self._users.find_by_username(username)
        if user is None:
            logger.info("Login failed: unknown user")
            raise InvalidCredentialsError()

        if not self._hasher.verify(password or "", user.password_hash):
            logger.info("Login failed for user %r: password mismatch", user.username)
            raise InvalidCredentialsError()

        return self._issuer.issue(user.username)
