"""Async client for the public PokeAPI reference data provider.

Only the few fields cached by the catalog are read: the paginated resource
list (``results[].name``/``results[].url``) and, per resource, ``id``,
``name`` and ``sprites``. Every request goes through a
:class:`~pokedex_api.circuit_breaker.CircuitBreaker`; transport errors, HTTP
error statuses and an open breaker are all reported as
:class:`~pokedex_api.exceptions.ReferenceDataUnavailableError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from pokedex_api.circuit_breaker import (
    CircuitBreaker,
    CircuitOpenError,
    create_http_circuit_breaker,
)
from pokedex_api.exceptions import ReferenceDataUnavailableError

logger = logging.getLogger(__name__)


class PokeApiClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        breaker: Optional[CircuitBreaker] = None,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._breaker = breaker or create_http_circuit_breaker("PokeAPI")

    async def list_resources(self, resource: str, limit: int) -> List[Dict[str, str]]:
        """Return ``[{"name": ..., "url": ...}, ...]`` for ``resource``."""
        payload = await self._get_json(
            f"{self._base_url}/{resource}", params={"limit": limit}
        )
        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise ReferenceDataUnavailableError(
                f"Unexpected {resource} listing from reference data provider"
            )
        return results

    async def get_resource(self, url: str) -> Dict[str, Any]:
        return await self._get_json(url)

    async def _fetch(
        self, url: str, params: Optional[Dict[str, Any]]
    ) -> httpx.Response:
        response = await self._http.get(url, params=params)
        response.raise_for_status()
        return response

    async def _get_json(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            response = await self._breaker.call(self._fetch, url, params)
        except CircuitOpenError as exc:
            raise ReferenceDataUnavailableError(str(exc)) from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "PokeAPI returned %s for %s", exc.response.status_code, url
            )
            raise ReferenceDataUnavailableError() from exc
        except httpx.HTTPError as exc:
            logger.warning("PokeAPI request to %s failed: %s", url, exc)
            raise ReferenceDataUnavailableError() from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ReferenceDataUnavailableError(
                "Malformed response from reference data provider"
            ) from exc
