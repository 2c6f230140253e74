"""Port for the locally cached vulnerability catalog."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CatalogStore(Protocol):
    """File-backed catalog cache with a freshness policy."""

    def needs_update(self) -> bool:
        """Return ``True`` when the cached catalog is missing or stale."""
        ...

    def download(self) -> None:
        """Fetch the catalog and overwrite the cached copy."""
        ...

    def read(self) -> bytes:
        """Return the cached catalog content."""
        ...


__all__ = ["CatalogStore"]
