"""Async HTTP client for a Chef Supermarket registry.

SupermarketClient wraps a single ``httpx.AsyncClient`` (connection pool
shared by every request) and adds:

* exponential back-off retries on transport errors, 429 and 5xx, honouring
  a numeric Retry-After header;
* the error taxonomy of ``larder.client.errors`` for everything else;
* decoding of each document into larder models.

Usage::

    async with SupermarketClient(config.registry) as client:
        universe = await client.get_universe()
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from larder.client.errors import (
    MalformedResponseError,
    PackageNotFoundError,
    RegistryStatusError,
    RegistryTransportError,
)
from larder.client.parse import parse_cookbook, parse_cookbook_version, parse_universe
from larder.models.config import RegistryConfig
from larder.models.cookbook import Cookbook, CookbookVersion
from larder.models.universe import Package, Universe

_log = structlog.get_logger(component="client.supermarket")

_MAX_BACKOFF_SECONDS = 30.0
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})
_API_SUFFIX = "/api/v1"


def universe_url(endpoint: str) -> str:
    """Return the universe URL served next to an ``.../api/v1`` endpoint."""
    base = endpoint.rstrip("/")
    if base.endswith(_API_SUFFIX):
        base = base[: -len(_API_SUFFIX)]
    return f"{base}/universe"


def version_slug(version: str) -> str:
    """Supermarket addresses versions with underscores: 1.2.3 -> 1_2_3."""
    return version.replace(".", "_")


class SupermarketClient:
    """Read-only client for the cookbook and universe endpoints.

    Args:
        config:    Registry settings (endpoint, timeout, retries, back-off).
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or RegistryConfig()
        self._endpoint = self._config.endpoint.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout_seconds),
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def __aenter__(self) -> SupermarketClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Cookbooks
    # ------------------------------------------------------------------

    async def get_cookbook(self, name: str) -> Cookbook:
        """Fetch the detail record of cookbook *name*."""
        url = f"{self._endpoint}/cookbooks/{quote(name, safe='')}"
        data = await self._get_json(url, name=name)
        cookbook = parse_cookbook(data, url)
        _log.debug("cookbook_fetched", name=name, versions=len(cookbook.versions))
        return cookbook

    async def get_cookbooks(self, names: list[str]) -> dict[str, Cookbook]:
        """Fetch several cookbooks concurrently, at most ``max_concurrency`` in flight.

        The first failure cancels the fetches still in flight and propagates
        to the caller.
        """
        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def _one(name: str) -> Cookbook:
            async with semaphore:
                return await self.get_cookbook(name)

        unique = list(dict.fromkeys(names))
        try:
            async with asyncio.TaskGroup() as group:
                tasks = {name: group.create_task(_one(name)) for name in unique}
        except ExceptionGroup as failed:
            raise failed.exceptions[0] from None
        return {name: task.result() for name, task in tasks.items()}

    async def get_cookbook_version(self, name: str, version: str) -> CookbookVersion:
        """Fetch one published version of cookbook *name*."""
        url = f"{self._endpoint}/cookbooks/{quote(name, safe='')}/versions/{quote(version_slug(version), safe='')}"
        data = await self._get_json(url, name=name)
        return parse_cookbook_version(data, url)

    # ------------------------------------------------------------------
    # Universe
    # ------------------------------------------------------------------

    async def get_universe(self) -> Universe:
        """Fetch every package and version the registry knows about."""
        url = universe_url(self._endpoint)
        data = await self._get_json(url)
        universe = parse_universe(data, url)
        _log.info("universe_fetched", url=url, packages=len(universe.packages))
        return universe

    async def get_package(self, name: str) -> Package:
        """Return package *name* as listed in the universe."""
        universe = await self.get_universe()
        package = universe.get(name)
        if package is None:
            raise PackageNotFoundError(universe_url(self._endpoint), name)
        return package

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _backoff(self, attempt: int, response: httpx.Response | None = None) -> float:
        """Seconds to wait before retry *attempt*; a Retry-After header wins over the exponential delay."""
        delay = _retry_after_seconds(response) if response is not None else None
        if delay is None:
            delay = self._config.backoff_seconds * (2**attempt)
        return min(delay, _MAX_BACKOFF_SECONDS)

    async def _get_json(self, url: str, name: str | None = None) -> Any:
        """GET *url* and decode the JSON body, retrying transient failures.

        A 404 on a named cookbook becomes PackageNotFoundError.
        """
        attempt = 0
        while True:
            response: httpx.Response | None = None
            try:
                response = await self._client.get(url)
            except httpx.TransportError as exc:
                if attempt >= self._config.max_retries:
                    _log.warning("registry_unreachable", url=url, attempts=attempt + 1, error=str(exc))
                    raise RegistryTransportError(url, exc) from exc
                _log.info("registry_retry", url=url, attempt=attempt + 1, error=str(exc))
            else:
                if response.is_success:
                    return _decode(response, url)
                if response.status_code not in _RETRYABLE_STATUS or attempt >= self._config.max_retries:
                    _log.warning("registry_error_status", url=url, status_code=response.status_code)
                    if response.status_code == 404 and name is not None:
                        raise PackageNotFoundError(url, name)
                    raise RegistryStatusError(url, response.status_code)
                _log.info("registry_retry", url=url, attempt=attempt + 1, status_code=response.status_code)
            await asyncio.sleep(self._backoff(attempt, response))
            attempt += 1


def _retry_after_seconds(response: httpx.Response) -> float | None:
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def _decode(response: httpx.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponseError(url, f"invalid JSON body ({exc})") from exc


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------


async def fetch_universe(
    endpoint: str,
    config: RegistryConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Universe:
    """Fetch the universe of the registry at *endpoint* with a throwaway client."""
    settings = replace(config or RegistryConfig(), endpoint=endpoint)
    async with SupermarketClient(settings, transport=transport) as client:
        return await client.get_universe()


async def fetch_package(
    endpoint: str,
    name: str,
    config: RegistryConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Package:
    """Fetch package *name* from the registry at *endpoint* with a throwaway client."""
    settings = replace(config or RegistryConfig(), endpoint=endpoint)
    async with SupermarketClient(settings, transport=transport) as client:
        return await client.get_package(name)
