"""Known Exploited Vulnerabilities catalog and its loading workflow."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from kevsync.domain.ports.catalog import CatalogStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Vulnerability:
    cve_id: str
    vendor_project: str | None = None
    product: str | None = None
    vulnerability_name: str | None = None
    date_added: date | None = None
    short_description: str | None = None
    required_action: str | None = None
    due_date: date | None = None
    known_ransomware_campaign_use: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class Catalog:
    """Parsed catalog; rebuilt from the cached document on every run."""

    title: str | None = None
    catalog_version: str | None = None
    date_released: str | None = None
    count: int | None = None
    vulnerabilities: tuple[Vulnerability, ...] = field(default_factory=tuple)

    def identifiers(self) -> list[str]:
        """Return CVE identifiers in catalog order, duplicates included."""

        return [vulnerability.cve_id for vulnerability in self.vulnerabilities]


CatalogParser = Callable[[bytes], Catalog]


def ensure_fresh(store: CatalogStore) -> bytes:
    """Refresh ``store`` when it is stale and return the cached catalog bytes.

    Download failures propagate; no catalog is returned from a stale cache when the
    refresh fails.
    """

    log.info("Initializing KEV catalog")
    if store.needs_update():
        log.info("Downloading KEV catalog")
        store.download()
    else:
        log.info("Skip downloading KEV catalog, cached copy is fresh")
    return store.read()


def load_catalog(store: CatalogStore, parse: CatalogParser) -> Catalog:
    catalog = parse(ensure_fresh(store))
    log.info(
        "Loaded KEV catalog version=%s, vulnerabilities=%s",
        catalog.catalog_version,
        len(catalog.vulnerabilities),
    )
    return catalog


__all__ = ["Catalog", "CatalogParser", "Vulnerability", "ensure_fresh", "load_catalog"]
