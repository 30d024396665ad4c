"""Runtime configuration for the Pokedex API.

Settings are read once from the environment (optionally populated from a
``.env`` file) and passed explicitly into the application factory. The
variables ``SECRET_KEY`` and ``DATABASE_URL`` are required; a missing value
raises :class:`ValueError` so that misconfiguration fails at startup rather
than on the first request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

ENV_SECRET_KEY = "SECRET_KEY"
ENV_ALGORITHM = "ALGORITHM"
ENV_ACCESS_EXPIRE = "ACCESS_TOKEN_EXPIRE_MINUTES"
ENV_DATABASE_URL = "DATABASE_URL"
ENV_DB_ECHO = "DB_ECHO"
ENV_POKEAPI_BASE_URL = "POKEAPI_BASE_URL"
ENV_POKEAPI_TIMEOUT = "POKEAPI_TIMEOUT"
ENV_SEED_LIMIT = "SEED_LIMIT"
ENV_ROOT_PATH = "ROOT_PATH"

DEFAULT_ALGORITHM = "HS256"
DEFAULT_ACCESS_EXPIRE_MINUTES = 120
DEFAULT_POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
DEFAULT_POKEAPI_TIMEOUT = 10.0
DEFAULT_SEED_LIMIT = 1000

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration values.

    Attributes
    ----------
    secret_key:
        Shared HMAC secret used to sign and verify session tokens.
    database_url:
        SQLAlchemy async URL, e.g. ``postgresql+asyncpg://...``.
    algorithm:
        JWT signing algorithm; only symmetric HMAC algorithms are accepted.
    access_token_expire_minutes:
        Lifetime of an issued session token.
    """

    secret_key: str
    database_url: str
    algorithm: str = DEFAULT_ALGORITHM
    access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES
    pokeapi_base_url: str = DEFAULT_POKEAPI_BASE_URL
    pokeapi_timeout: float = DEFAULT_POKEAPI_TIMEOUT
    seed_limit: int = DEFAULT_SEED_LIMIT
    root_path: str = ""
    db_echo: bool = False


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer") from exc


def _float_setting(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number") from exc


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``).

    When reading the real process environment a ``.env`` file is loaded
    first, mirroring how the services are run locally.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    secret_key = environ.get(ENV_SECRET_KEY)
    database_url = environ.get(ENV_DATABASE_URL)
    if not secret_key or not database_url:
        raise ValueError(
            f"{ENV_SECRET_KEY} and {ENV_DATABASE_URL} must be set in the environment"
        )

    algorithm = environ.get(ENV_ALGORITHM) or DEFAULT_ALGORITHM
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(
            f"{ENV_ALGORITHM} must be one of {', '.join(SUPPORTED_ALGORITHMS)}"
        )

    expire_minutes = _int_setting(
        environ, ENV_ACCESS_EXPIRE, DEFAULT_ACCESS_EXPIRE_MINUTES
    )
    if expire_minutes <= 0:
        raise ValueError(f"{ENV_ACCESS_EXPIRE} must be positive")

    return Settings(
        secret_key=secret_key,
        database_url=database_url,
        algorithm=algorithm,
        access_token_expire_minutes=expire_minutes,
        pokeapi_base_url=(
            environ.get(ENV_POKEAPI_BASE_URL) or DEFAULT_POKEAPI_BASE_URL
        ).rstrip("/"),
        pokeapi_timeout=_float_setting(
            environ, ENV_POKEAPI_TIMEOUT, DEFAULT_POKEAPI_TIMEOUT
        ),
        seed_limit=_int_setting(environ, ENV_SEED_LIMIT, DEFAULT_SEED_LIMIT),
        root_path=environ.get(ENV_ROOT_PATH, ""),
        db_echo=environ.get(ENV_DB_ECHO, "").lower() in ("1", "true", "yes"),
    )
