"""Pokedex API FastAPI application.

:func:`create_app` wires the configuration into the collaborators kept on
``app.state`` and mounts the routers from :mod:`pokedex_api.routes`. The
database engine and the outbound HTTP client are opened by the lifespan
handler and closed on shutdown.

Run with::

    uvicorn pokedex_api.app:create_app --factory
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, Dict, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pokedex_api.config import Settings, load_settings
from pokedex_api.database import create_engine, create_schema, create_sessionmaker
from pokedex_api.exceptions import (
    InfrastructureError,
    PokedexError,
    UnauthenticatedError,
)
from pokedex_api.pokeapi import PokeApiClient
from pokedex_api.routes import auth_router, item_router, pokemon_router
from pokedex_api.security import PasswordHasher, SessionIssuer

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def handle_pokedex_error(request: Request, exc: PokedexError) -> JSONResponse:
    """Render a :class:`PokedexError` as ``{"error", "detail"}``."""
    if isinstance(exc, InfrastructureError):
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
        )
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=int(exc.status), content=exc.to_dict(), headers=headers
    )


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the application.

    ``settings`` defaults to :func:`load_settings`, which raises if the
    signing secret or database URL is missing. ``http_client`` lets callers
    supply the client used to reach PokeAPI; the caller keeps ownership and
    closes it.
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = create_engine(settings.database_url, echo=settings.db_echo)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        try:
            await create_schema(engine)
        except Exception as exc:
            logger.error("DB Init failed: %s", exc)

        owns_http = http_client is None
        http = http_client or httpx.AsyncClient(timeout=settings.pokeapi_timeout)
        app.state.pokeapi = PokeApiClient(http, settings.pokeapi_base_url)
        logger.info("Pokedex API started (PokeAPI at %s)", settings.pokeapi_base_url)

        yield

        if owns_http:
            await http.aclose()
        await engine.dispose()
        logger.info("Pokedex API stopped")

    app = FastAPI(
        title="Pokedex API",
        root_path=settings.root_path,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.hasher = PasswordHasher()
    app.state.issuer = SessionIssuer(
        settings.secret_key,
        algorithm=settings.algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )

    app.add_exception_handler(PokedexError, handle_pokedex_error)
    app.include_router(auth_router)
    app.include_router(pokemon_router)
    app.include_router(item_router)

    @app.get("/health")
    async def health() -> Dict[str, str]:
        """Health check endpoint returning the service status."""
        return {"status": "ok"}

    return app
