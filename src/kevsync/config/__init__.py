"""Application configuration helpers."""

from __future__ import annotations

from .dependencytrack import (
    DEFAULT_DEPENDENCYTRACK_BASE_URL,
    RATE_LIMIT_ENV,
    DependencyTrackConfig,
    build_dependencytrack_config,
    get_dependencytrack_config,
    parse_rate_limit,
)
from .env import env_list, env_or_default, require_env_vars, split_list
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .kev import DEFAULT_KEV_CATALOG_URL, KevConfig, get_kev_config
from .logging import configure_logging
from .policy import (
    DEFAULT_POLICY_OPERATOR,
    DEFAULT_POLICY_VIOLATION_STATE,
    PolicyConfig,
    get_policy_config,
)

__all__ = [
    "DEFAULT_DEPENDENCYTRACK_BASE_URL",
    "DEFAULT_KEV_CATALOG_URL",
    "DEFAULT_POLICY_OPERATOR",
    "DEFAULT_POLICY_VIOLATION_STATE",
    "ConfigurationError",
    "DependencyTrackConfig",
    "KevConfig",
    "MissingConfigurationError",
    "PolicyConfig",
    "RATE_LIMIT_ENV",
    "RateLimit",
    "ResilienceConfig",
    "build_dependencytrack_config",
    "configure_logging",
    "env_list",
    "env_or_default",
    "get_dependencytrack_config",
    "get_kev_config",
    "get_policy_config",
    "parse_rate_limit",
    "require_env_vars",
    "split_list",
]
