"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogStore
from .policy_service import PolicyService

__all__ = ["CatalogStore", "PolicyService"]
