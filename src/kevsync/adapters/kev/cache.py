"""Local file cache for the KEV catalog.

The cache directory holds two files: the raw catalog and a companion file with
the RFC 3339 timestamp of the download that produced it. Both are rewritten on
every download, content first, and the timestamp only after the content landed.
"""

from __future__ import annotations

import asyncio
import os
import re
import tempfile
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from kevsync.adapters.http_resilience import ResilientClient
from kevsync.domain.catalog import ensure_fresh as ensure_fresh_catalog
from kevsync.domain.clock import utcnow
from kevsync.domain.errors import CatalogReadError, CatalogWriteError, FetchError

if TYPE_CHECKING:
    from kevsync.adapters.http_resilience import ClientFactory
    from kevsync.config.kev import KevConfig
    from kevsync.domain.clock import Clock

log = getLogger(__name__)

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})"
)
_TEMP_PREFIX = ".kevsync-"
_TEMP_SUFFIX = ".tmp"


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(text: str) -> datetime | None:
    """Parse an RFC 3339 timestamp; anything else yields ``None``."""

    text = text.strip()
    if not _RFC3339.fullmatch(text):
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(slots=True)
class KevCatalogCache:
    config: KevConfig
    clock: Clock = field(default=utcnow)
    client_factory: ClientFactory = field(default=ResilientClient)

    @property
    def catalog_path(self) -> Path:
        return self.config.catalog_path()

    @property
    def downloaded_at_path(self) -> Path:
        return self.config.downloaded_at_path()

    def needs_update(self) -> bool:
        if not self.catalog_path.is_file():
            return True
        if not self.downloaded_at_path.is_file():
            return True

        try:
            text = self.downloaded_at_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return True

        downloaded_at = parse_timestamp(text)
        if downloaded_at is None:
            log.info("Unexpected timestamp in %s, refreshing catalog", self.downloaded_at_path)
            return True

        return self.clock() - downloaded_at > self.config.max_age

    def download(self) -> None:
        body = asyncio.run(self._fetch_async())
        self._write(body)

    def read(self) -> bytes:
        try:
            return self.catalog_path.read_bytes()
        except OSError as exc:
            raise CatalogReadError(
                f"Cannot read cached catalog {self.catalog_path}: {exc}"
            ) from exc

    def ensure_fresh(self) -> bytes:
        return ensure_fresh_catalog(self)

    async def _fetch_async(self) -> bytes:
        url = self.config.url
        try:
            async with self.client_factory(self.config.resilience()) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"KEV catalog fetch error: {url}: {exc}", url=url) from exc

        if not response.is_success:
            raise FetchError(
                f"KEV catalog fetch error: {url}: status {response.status_code}",
                url=url,
            )
        body = response.content
        if not body:
            raise FetchError(f"KEV catalog fetch error: {url}: empty body", url=url)
        return body

    def _write(self, body: bytes) -> None:
        downloaded_at = format_timestamp(self.clock())
        try:
            self.config.resolve_cache_dir().mkdir(parents=True, exist_ok=True)
            _write_atomic(self.catalog_path, body)
            _write_atomic(self.downloaded_at_path, downloaded_at.encode("utf-8"))
        except OSError as exc:
            raise CatalogWriteError(
                f"Cannot write KEV catalog cache in {self.config.resolve_cache_dir()}: {exc}",
                url=self.config.url,
            ) from exc
        log.info("Cached KEV catalog (%s bytes) at %s", len(body), downloaded_at)


def _write_atomic(path: Path, payload: bytes) -> None:
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=_TEMP_PREFIX,
        suffix=_TEMP_SUFFIX,
        delete=False,
    ) as handle:
        temp_path = Path(handle.name)
    try:
        temp_path.write_bytes(payload)
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
