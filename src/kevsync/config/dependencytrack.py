"""Dependency-Track configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_or_default, require_env_vars
from .errors import ConfigurationError
from .http_resilience import DEFAULT_TIMEOUT_SECONDS, RateLimit, ResilienceConfig

DEFAULT_DEPENDENCYTRACK_BASE_URL = "http://127.0.0.1:8081/"
API_KEY_HEADER = "X-Api-Key"
RATE_LIMIT_ENV = "DT_MAX_REQUESTS_PER_SECOND"


@dataclass(frozen=True)
class DependencyTrackConfig:
    """Holds Dependency-Track API configuration values."""

    base_url: str
    api_key: str
    resilience: ResilienceConfig


def parse_rate_limit(value: str | int | None) -> RateLimit | None:
    """Turn a requests-per-second value into a ``RateLimit``; unset or 0 means unthrottled."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        per_second = int(value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid request rate {value!r} (expected a whole number of requests per second)"
        ) from None
    if per_second < 0:
        raise ConfigurationError(f"Invalid request rate {value!r} (must not be negative)")
    if per_second == 0:
        return None
    return RateLimit(max_calls=per_second, per_seconds=1.0)


def build_dependencytrack_config(
    *,
    base_url: str,
    api_key: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ratelimit: RateLimit | None = None,
) -> DependencyTrackConfig:
    api_root = base_url.rstrip("/") + "/api/v1/"
    return DependencyTrackConfig(
        base_url=base_url,
        api_key=api_key,
        resilience=ResilienceConfig(
            name="dependencytrack",
            base_url=api_root,
            timeout_seconds=timeout_seconds,
            ratelimit=ratelimit,
            default_headers={API_KEY_HEADER: api_key, "Accept": "application/json"},
        ),
    )


def get_dependencytrack_config() -> DependencyTrackConfig:
    values = require_env_vars(("DT_API_KEY",))
    return build_dependencytrack_config(
        base_url=env_or_default("DT_BASE_URL", DEFAULT_DEPENDENCYTRACK_BASE_URL),
        api_key=values["DT_API_KEY"],
        ratelimit=parse_rate_limit(os.getenv(RATE_LIMIT_ENV)),
    )
