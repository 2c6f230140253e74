"""CISA Known Exploited Vulnerabilities catalog adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kevsync.config.kev import get_kev_config
from kevsync.domain.catalog import load_catalog

from .cache import KevCatalogCache, format_timestamp, parse_timestamp
from .schema import KevCatalogPayload, KevVulnerabilityPayload
from .translator import parse_catalog

if TYPE_CHECKING:
    from kevsync.config.kev import KevConfig
    from kevsync.domain.catalog import Catalog


def load_kev_catalog(config: KevConfig | None = None) -> Catalog:
    """Refresh the cached catalog when stale and return it parsed."""

    return load_catalog(KevCatalogCache(config=config or get_kev_config()), parse_catalog)


__all__ = [
    "KevCatalogCache",
    "KevCatalogPayload",
    "KevVulnerabilityPayload",
    "format_timestamp",
    "load_kev_catalog",
    "parse_catalog",
    "parse_timestamp",
]
