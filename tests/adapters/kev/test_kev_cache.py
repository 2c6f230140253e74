from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import httpx
import pytest

from kevsync.adapters.kev import KevCatalogCache, format_timestamp, load_kev_catalog, parse_timestamp
from kevsync.config.kev import KevConfig
from kevsync.domain.errors import CatalogReadError, CatalogWriteError, FetchError
from tests.helpers.http import make_client_factory

if TYPE_CHECKING:
    from pathlib import Path

KEV_URL = "https://kev.test/feeds/known_exploited_vulnerabilities.json"
DOWNLOADED_AT = datetime(2019, 10, 1, tzinfo=UTC)


@pytest.fixture
def kev_config(tmp_path: Path) -> KevConfig:
    return KevConfig(url=KEV_URL, cache_dir=tmp_path / "cache")


def _seed(config: KevConfig, *, content: bytes = b"{}", downloaded_at: str | None) -> None:
    config.resolve_cache_dir().mkdir(parents=True, exist_ok=True)
    config.catalog_path().write_bytes(content)
    if downloaded_at is not None:
        config.downloaded_at_path().write_text(downloaded_at, encoding="utf-8")


def _cache_at(config: KevConfig, now: datetime, **kwargs: object) -> KevCatalogCache:
    return KevCatalogCache(config=config, clock=lambda: now, **kwargs)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (timedelta(hours=23, minutes=59, seconds=59), False),
        (timedelta(hours=24), False),
        (timedelta(hours=24, seconds=1), True),
        (timedelta(days=3), True),
    ],
)
def test_freshness_window(kev_config: KevConfig, age: timedelta, expected: bool) -> None:
    _seed(kev_config, downloaded_at="2019-10-01T00:00:00Z")

    assert _cache_at(kev_config, DOWNLOADED_AT + age).needs_update() is expected


def test_missing_files_need_update(kev_config: KevConfig) -> None:
    cache = _cache_at(kev_config, DOWNLOADED_AT)
    assert cache.needs_update()

    _seed(kev_config, downloaded_at=None)
    assert cache.needs_update()


def test_missing_content_with_timestamp_needs_update(kev_config: KevConfig) -> None:
    _seed(kev_config, downloaded_at="2019-10-01T00:00:00Z")
    kev_config.catalog_path().unlink()

    assert _cache_at(kev_config, DOWNLOADED_AT).needs_update()


@pytest.mark.parametrize("value", ["yesterday", "", "2019-10-01", "2019-10-01T00:00:00"])
def test_unparseable_timestamp_needs_update(kev_config: KevConfig, value: str) -> None:
    _seed(kev_config, downloaded_at=value)

    assert _cache_at(kev_config, DOWNLOADED_AT).needs_update()


def test_parse_timestamp_accepts_offsets() -> None:
    assert parse_timestamp("2019-10-01T02:00:00+02:00") == DOWNLOADED_AT
    assert parse_timestamp("2019-10-01T00:00:00Z\n") == DOWNLOADED_AT
    assert parse_timestamp("not a date") is None


def test_format_timestamp_is_utc_seconds() -> None:
    value = datetime(2019, 10, 1, 2, 0, 0, 123456, tzinfo=UTC) + timedelta(hours=-2)

    assert format_timestamp(value) == "2019-10-01T00:00:00Z"


def test_download_writes_content_then_timestamp(kev_config: KevConfig) -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=b'{"vulnerabilities": []}')

    cache = _cache_at(kev_config, DOWNLOADED_AT, client_factory=make_client_factory(handler))
    cache.download()

    assert requested == [KEV_URL]
    assert kev_config.catalog_path().read_bytes() == b'{"vulnerabilities": []}'
    assert kev_config.downloaded_at_path().read_text(encoding="utf-8") == "2019-10-01T00:00:00Z"
    assert not cache.needs_update()


@pytest.mark.parametrize(
    "response",
    [httpx.Response(500, content=b"oops"), httpx.Response(404), httpx.Response(200)],
)
def test_download_failures_raise_fetch_error(
    kev_config: KevConfig, response: httpx.Response
) -> None:
    cache = _cache_at(
        kev_config, DOWNLOADED_AT, client_factory=make_client_factory(lambda _request: response)
    )

    with pytest.raises(FetchError) as excinfo:
        cache.download()

    assert excinfo.value.url == KEV_URL
    assert not kev_config.catalog_path().exists()
    assert not kev_config.downloaded_at_path().exists()


def test_transport_error_raises_fetch_error(kev_config: KevConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    cache = _cache_at(kev_config, DOWNLOADED_AT, client_factory=make_client_factory(handler))

    with pytest.raises(FetchError):
        cache.download()


def test_failed_write_is_reported(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    config = KevConfig(url=KEV_URL, cache_dir=blocker)
    cache = _cache_at(
        config,
        DOWNLOADED_AT,
        client_factory=make_client_factory(lambda _request: httpx.Response(200, content=b"{}")),
    )

    with pytest.raises(CatalogWriteError):
        cache.download()


def test_read_missing_content_raises(kev_config: KevConfig) -> None:
    with pytest.raises(CatalogReadError):
        _cache_at(kev_config, DOWNLOADED_AT).read()


def test_ensure_fresh_refreshes_stale_cache(kev_config: KevConfig) -> None:
    _seed(kev_config, content=b"old", downloaded_at="2019-09-01T00:00:00Z")
    cache = _cache_at(
        kev_config,
        DOWNLOADED_AT,
        client_factory=make_client_factory(lambda _request: httpx.Response(200, content=b"new")),
    )

    assert cache.ensure_fresh() == b"new"


def test_ensure_fresh_keeps_fresh_cache(kev_config: KevConfig) -> None:
    _seed(kev_config, content=b"cached", downloaded_at="2019-10-01T00:00:00Z")

    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("fresh cache must not be downloaded")

    cache = _cache_at(
        kev_config,
        DOWNLOADED_AT + timedelta(hours=1),
        client_factory=make_client_factory(handler),
    )

    assert cache.ensure_fresh() == b"cached"


def test_load_kev_catalog_reads_fresh_cache(kev_config: KevConfig, kev_catalog_bytes: bytes) -> None:
    _seed(
        kev_config,
        content=kev_catalog_bytes,
        downloaded_at=format_timestamp(datetime.now(UTC)),
    )

    catalog = load_kev_catalog(kev_config)

    assert catalog.identifiers() == ["CVE-2021-44228", "CVE-2023-4966", "CVE-2021-44228"]
