"""Runtime error taxonomy.

Catalog errors (fetch, read, parse) stop a run before the remote policy is
touched. Remote errors distinguish "not found" from every other failure so the
reconciler can tolerate the former where it is safe to do so.
"""

from __future__ import annotations


class KevSyncError(RuntimeError):
    """Base class for errors raised while synchronising a policy."""


class FetchError(KevSyncError):
    """Raised when the catalog cannot be downloaded."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class CatalogWriteError(FetchError):
    """Raised when a downloaded catalog cannot be written to the cache directory."""


class CatalogReadError(KevSyncError):
    """Raised when the cached catalog content is missing or unreadable."""


class CatalogParseError(KevSyncError):
    """Raised when the cached catalog is not a valid catalog document."""


class RemoteError(KevSyncError):
    """Base class for failures reported by the remote policy service."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteNotFoundError(RemoteError):
    """Raised when the remote service reports that a target does not exist."""


class RemoteOperationError(RemoteError):
    """Raised for every remote failure that is not a "not found"."""


__all__ = [
    "CatalogParseError",
    "CatalogReadError",
    "CatalogWriteError",
    "FetchError",
    "KevSyncError",
    "RemoteError",
    "RemoteNotFoundError",
    "RemoteOperationError",
]
