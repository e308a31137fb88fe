# src/services/storefront.py

"""Orchestrates one browsing context: resolve, shop, check out."""

import asyncio
import logging
import webbrowser

from src.models.errors import CatalogNotLoadedError, ValidationError
from src.models.product import Product, Vendor
from src.services.cart_engine import CartEngine
from src.services.catalog_resolver import CatalogResolver, StoreCatalog
from src.services.checkout_formatter import CheckoutMessage, format_checkout
from src.storage.cart_storage import CartStorage, JsonCartStorage
from src.storage.catalog_store import CatalogStore, create_store

logger = logging.getLogger("storefront.session")


class Storefront:
    """Couples the resolver, the cart engine and the checkout formatter.

    Until :meth:`open_store` succeeds no product can be added; the cart
    itself (loaded from storage) is visible straight away.
    """

    def __init__(
        self,
        store: CatalogStore | None = None,
        cart_storage: CartStorage | None = None,
        namespace: str | None = None,
        clear_after_checkout: bool = False,
    ) -> None:
        self.store = store or create_store()
        self.resolver = CatalogResolver(self.store)
        self.cart = CartEngine(cart_storage or JsonCartStorage(), namespace)
        self.catalog: StoreCatalog | None = None
        self.clear_after_checkout = clear_after_checkout

    @property
    def vendor(self) -> Vendor:
        return self._require_catalog().vendor

    def _require_catalog(self) -> StoreCatalog:
        if self.catalog is None:
            raise CatalogNotLoadedError("No store has been opened yet")
        return self.catalog

    async def open_store(self, store_slug: str) -> StoreCatalog:
        """Resolve *store_slug* in a worker thread and make it current.

        A failed resolve leaves the previously opened catalog in place.
        """
        catalog: StoreCatalog = await asyncio.to_thread(
            self.resolver.resolve, store_slug
        )
        self.catalog = catalog
        return catalog

    def product(self, product_id: str) -> Product:
        product = self._require_catalog().find(product_id)
        if product is None:
            raise ValidationError(
                f"Product '{product_id}' is not in this catalog"
            )
        return product

    def add(self, product_id: str) -> Product:
        product = self.product(product_id)
        self.cart.add_to_cart(product)
        return product

    def increase(self, product_id: str) -> None:
        self.cart.increase_quantity(product_id)

    def decrease(self, product_id: str) -> None:
        self.cart.decrease_quantity(product_id)

    def remove(self, product_id: str) -> None:
        self.cart.remove_from_cart(product_id)

    def clear(self) -> None:
        self.cart.clear_cart()

    def checkout(self, open_browser: bool = False) -> CheckoutMessage:
        """Format the current vendor's lines and optionally open WhatsApp."""
        vendor = self.vendor
        message = format_checkout(self.cart.items, vendor)
        logger.info(
            "Checkout for %s: %d lines, total %s",
            vendor.store_slug,
            message.line_count,
            message.total,
        )
        if open_browser:
            webbrowser.open(message.deep_link)
        if self.clear_after_checkout:
            for item in self.cart.items_for_vendor(vendor.id):
                self.cart.remove_from_cart(item.product_id)
        return message

    def close(self) -> None:
        self.store.close()
