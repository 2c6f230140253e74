"""Pydantic models describing the CISA KEV catalog feed."""

from __future__ import annotations

from datetime import date  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class KevBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class KevVulnerabilityPayload(KevBaseModel):
    cve_id: str = Field(alias="cveID", min_length=1)
    vendor_project: str | None = Field(default=None, alias="vendorProject")
    product: str | None = None
    vulnerability_name: str | None = Field(default=None, alias="vulnerabilityName")
    date_added: date | None = Field(default=None, alias="dateAdded")
    short_description: str | None = Field(default=None, alias="shortDescription")
    required_action: str | None = Field(default=None, alias="requiredAction")
    due_date: date | None = Field(default=None, alias="dueDate")
    known_ransomware_campaign_use: str | None = Field(
        default=None, alias="knownRansomwareCampaignUse"
    )
    notes: str | None = None

    _normalize_optional = field_validator(
        "vendor_project",
        "product",
        "vulnerability_name",
        "date_added",
        "short_description",
        "required_action",
        "due_date",
        "known_ransomware_campaign_use",
        "notes",
        mode="before",
    )(_blank_to_none)

    @field_validator("cve_id", mode="before")
    @classmethod
    def _strip_id(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class KevCatalogPayload(KevBaseModel):
    title: str | None = None
    catalog_version: str | None = Field(default=None, alias="catalogVersion")
    date_released: str | None = Field(default=None, alias="dateReleased")
    count: int | None = None
    vulnerabilities: list[KevVulnerabilityPayload]
