"""Shared async HTTP client for the catalog feed and the Dependency-Track API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypedDict

import httpx
from aiolimiter import AsyncLimiter

from kevsync.config.http_resilience import RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

__all__ = [
    "ClientFactory",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "build_limiter",
]


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: float
    headers: dict[str, str]
    follow_redirects: bool
    transport: httpx.AsyncBaseTransport


def build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


class ResilientClient:
    """``httpx.AsyncClient`` bound to one ``ResilienceConfig``.

    Applies the configured timeout and default headers, and throttles calls
    through ``limiter``. Pass a limiter owned by the caller to share one budget
    across several short-lived clients; without one, a limiter is built from
    ``config.ratelimit``. Failed requests are never retried.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        limiter: AsyncLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = limiter if limiter is not None else build_limiter(config.ratelimit)
        self._client = httpx.AsyncClient(**_client_options(config, transport))

    @property
    def limiter(self) -> AsyncLimiter | None:
        return self._limiter

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: object | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, params=params, json=json)
        async with self._limiter:
            return await self._client.request(method, url, params=params, json=json)

    async def get(self, url: str, *, params: Mapping[str, str] | None = None) -> httpx.Response:
        return await self.request("GET", url, params=params)


class ClientFactory(Protocol):
    def __call__(
        self, config: ResilienceConfig, *, limiter: AsyncLimiter | None = None
    ) -> ResilientClient: ...


def _client_options(
    config: ResilienceConfig, transport: httpx.AsyncBaseTransport | None
) -> AsyncClientOptions:
    options: AsyncClientOptions = {
        "timeout": config.timeout_seconds,
        "follow_redirects": True,
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)
    if transport is not None:
        options["transport"] = transport
    return options
