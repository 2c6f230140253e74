"""Translate KEV catalog payloads into domain catalogs."""

from __future__ import annotations

from pydantic import ValidationError

from kevsync.domain.catalog import Catalog, Vulnerability
from kevsync.domain.errors import CatalogParseError

from .schema import KevCatalogPayload, KevVulnerabilityPayload


def parse_catalog(raw: bytes) -> Catalog:
    """Parse cached catalog bytes; malformed documents raise ``CatalogParseError``."""

    try:
        payload = KevCatalogPayload.model_validate_json(raw)
    except ValidationError as exc:
        raise CatalogParseError(f"Invalid KEV catalog: {exc}") from exc
    return translate_catalog(payload)


def translate_catalog(payload: KevCatalogPayload) -> Catalog:
    return Catalog(
        title=payload.title,
        catalog_version=payload.catalog_version,
        date_released=payload.date_released,
        count=payload.count,
        vulnerabilities=tuple(_translate_vulnerability(item) for item in payload.vulnerabilities),
    )


def _translate_vulnerability(payload: KevVulnerabilityPayload) -> Vulnerability:
    return Vulnerability(
        cve_id=payload.cve_id,
        vendor_project=payload.vendor_project,
        product=payload.product,
        vulnerability_name=payload.vulnerability_name,
        date_added=payload.date_added,
        short_description=payload.short_description,
        required_action=payload.required_action,
        due_date=payload.due_date,
        known_ransomware_campaign_use=payload.known_ransomware_campaign_use,
        notes=payload.notes,
    )
