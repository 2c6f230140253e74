"""KEV catalog source and cache location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Final

from .env import env_or_default
from .http_resilience import ResilienceConfig

APP_DIR_NAME: Final[str] = "kevsync"
DEFAULT_KEV_CATALOG_URL: Final[str] = (
    "https://www.cisa.gov/sites/default/files/feeds/known_exploited_vulnerabilities.json"
)
CATALOG_FILENAME: Final[str] = "kev.json"
DOWNLOADED_AT_FILENAME: Final[str] = "kev_downloaded_at"
DEFAULT_MAX_AGE: Final[timedelta] = timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class KevConfig:
    url: str
    cache_dir: Path
    max_age: timedelta = DEFAULT_MAX_AGE
    catalog_filename: str = CATALOG_FILENAME
    downloaded_at_filename: str = DOWNLOADED_AT_FILENAME

    def resolve_cache_dir(self) -> Path:
        return self.cache_dir.expanduser().resolve()

    def catalog_path(self) -> Path:
        return self.resolve_cache_dir() / self.catalog_filename

    def downloaded_at_path(self) -> Path:
        return self.resolve_cache_dir() / self.downloaded_at_filename

    def resilience(self) -> ResilienceConfig:
        return ResilienceConfig(name="kev")


def _default_cache_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_CACHE_HOME")
        base_path = Path(base) if base else (Path.home() / ".cache")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_kev_config() -> KevConfig:
    env_dir = os.getenv("KEVSYNC_CACHE_DIR")
    cache_dir = Path(env_dir) if env_dir else _default_cache_dir()
    return KevConfig(
        url=env_or_default("KEVSYNC_KEV_URL", DEFAULT_KEV_CATALOG_URL),
        cache_dir=cache_dir,
    )
