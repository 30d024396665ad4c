"""Security helpers: password hashing and session token issuance.

:class:`PasswordHasher` wraps :class:`passlib.context.CryptContext` and
:class:`SessionIssuer` wraps :mod:`jwt` (PyJWT). Neither reads the
environment; the signing secret and token lifetime come from
:class:`~pokedex_api.config.Settings` through their constructors, so tests can
build them with their own secret and clock.

The stored digest format is the unsalted ``hex_sha256`` scheme: the same
password always produces the same digest. Stronger schemes (argon2, bcrypt)
change the stored format and are listed in ``DESIGN.md`` as a migration path.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from passlib.context import CryptContext
from passlib.exc import PasswordSizeError

from pokedex_api.config import DEFAULT_ACCESS_EXPIRE_MINUTES, DEFAULT_ALGORITHM
from pokedex_api.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

PASSWORD_SCHEMES = ["hex_sha256"]

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """Deterministic one-way transform from plaintext password to digest."""

    def __init__(self, schemes: Optional[list] = None) -> None:
        self._context = CryptContext(schemes=schemes or PASSWORD_SCHEMES)

    def hash(self, password: str) -> str:
        """Return the digest of ``password``.

        Raises:
            InvalidInputError: If the password is longer than passlib accepts.
        """
        try:
            return self._context.hash(password)
        except PasswordSizeError as exc:
            raise InvalidInputError("Password is too long") from exc

    def verify(self, password: str, password_hash: str) -> bool:
        """Return ``True`` when ``password`` digests to ``password_hash``.

        Unrecognised or corrupt stored hashes and oversized passwords count
        as a mismatch.
        """
        try:
            return self._context.verify(password, password_hash)
        except PasswordSizeError:
            return False
        except (ValueError, TypeError):
            logger.warning("Stored password hash has an unrecognised format")
            return False


class SessionIssuer:
    """Mint and verify signed, time-bounded session tokens.

    Tokens are HS256 JWTs with the claims ``sub`` (username), ``iat`` and
    ``exp``. They are stateless and cannot be revoked before ``exp``.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        expires_delta: timedelta = timedelta(minutes=DEFAULT_ACCESS_EXPIRE_MINUTES),
        clock: Clock = utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("SessionIssuer requires a non-empty secret key")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_delta = expires_delta
        self._clock = clock

    def issue(self, subject: str) -> str:
        """Return a token asserting ``subject``, valid for ``expires_delta``."""
        issued_at = self._clock()
        claims = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + self._expires_delta,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> Optional[str]:
        """Return the token subject, or ``None`` if the token is not valid.

        Bad signatures, malformed tokens, missing claims and expired tokens
        are all reported as ``None``. Expiry is checked against the injected
        clock, not the wall clock.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected invalid session token: %s", exc)
            return None

        try:
            expires_at = float(payload["exp"])
        except (TypeError, ValueError):
            logger.info("Rejected session token with a malformed exp claim")
            return None
        if expires_at <= self._clock().timestamp():
            logger.info("Rejected expired session token")
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject
