# src/storage/catalog_store.py

"""Abstract base class for catalog store backends."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from src.config.settings import Settings

Row = dict[str, Any]


class CatalogStore(ABC):
    """Read-only access to vendor profiles and their products.

    Implementations return plain rows; parsing and validation happen in
    the resolver.  Unreachable backends raise
    :class:`~src.models.errors.TransientFetchError`.
    """

    def __init__(self, backend_name: str) -> None:
        self.backend_name = backend_name
        self.logger = logging.getLogger(
            f"storefront.store.{backend_name}"
        )

    @abstractmethod
    def fetch_vendors(self, store_slug: str) -> list[Row]:
        """Return every vendor row whose slug equals *store_slug*."""
        ...

    @abstractmethod
    def fetch_active_products(self, vendor_id: str) -> list[Row]:
        """Return the vendor's ``is_active`` product rows.

        Rows come back category-sorted, then in insertion order.
        """
        ...

    @abstractmethod
    def ping(self) -> None:
        """Issue the cheapest possible round-trip, raising on failure."""
        ...

    def close(self) -> None:
        """Release backend resources (no-op by default)."""
        return None


def create_store(backend: str | None = None) -> CatalogStore:
    """Build the configured store backend (``rest`` or ``sqlite``)."""
    choice = (backend or Settings.STORE_BACKEND).strip().lower()
    if choice == "rest":
        from src.storage.rest_store import RestCatalogStore

        return RestCatalogStore()
    if choice == "sqlite":
        from src.storage.sqlite_store import SQLiteCatalogStore

        return SQLiteCatalogStore()
    raise ValueError(f"Unknown store backend: {choice!r}")
