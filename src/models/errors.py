# src/models/errors.py

"""Exception hierarchy for the storefront core."""


class StorefrontError(Exception):
    """Base class for every error raised by the storefront core."""


class NotFound(StorefrontError):
    """No single vendor matches the requested store slug."""

    def __init__(self, store_slug: str) -> None:
        super().__init__(f"Store '{store_slug}' does not exist")
        self.store_slug = store_slug


class TransientFetchError(StorefrontError):
    """The catalog store could not be reached; the caller may retry."""


class StoreError(StorefrontError):
    """The catalog store rejected a request (not worth retrying)."""


class ValidationError(StorefrontError):
    """Product or snapshot data is malformed and was refused."""


class CatalogNotLoadedError(StorefrontError):
    """A cart mutation was attempted before any catalog was resolved."""


class EmptyCartError(StorefrontError):
    """Checkout was requested with nothing to order for the vendor."""
