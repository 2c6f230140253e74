"""Errors raised while assembling configuration, before any network call."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a configuration value cannot be used, e.g. an unknown operator."""


class MissingConfigurationError(ConfigurationError):
    """Raised when a required value such as the API key or policy name is absent."""
