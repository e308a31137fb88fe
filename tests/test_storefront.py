# tests/test_storefront.py

"""Tests for the Storefront session orchestrator."""

import unittest
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock, patch

from src.models.errors import (
    CatalogNotLoadedError,
    EmptyCartError,
    NotFound,
    TransientFetchError,
    ValidationError,
)
from src.services.storefront import Storefront
from src.storage.cart_storage import MemoryCartStorage
from src.storage.catalog_store import CatalogStore

VENDOR_ROW: dict[str, Any] = {
    "id": "v1",
    "business_name": "Mama Put",
    "store_slug": "mama-put",
    "whatsapp_number": "+234 800 000 0000",
}

PRODUCT_ROWS: list[dict[str, Any]] = [
    {"id": "rice", "vendor_id": "v1", "name": "Rice", "price": 1500,
     "category": "Meals", "is_active": True},
    {"id": "drink", "vendor_id": "v1", "name": "Drink", "price": 300,
     "category": "Drinks", "is_active": True},
]


def _store() -> MagicMock:
    store = MagicMock(spec=CatalogStore)
    store.fetch_vendors.return_value = [VENDOR_ROW]
    store.fetch_active_products.return_value = PRODUCT_ROWS
    return store


class TestStorefront(unittest.IsolatedAsyncioTestCase):
    """End-to-end flows over an in-memory cart."""

    def setUp(self) -> None:
        self.cart_storage = MemoryCartStorage()
        self.store = _store()
        self.shop = Storefront(
            store=self.store, cart_storage=self.cart_storage,
        )

    async def test_add_before_open_is_refused(self) -> None:
        with self.assertRaises(CatalogNotLoadedError):
            self.shop.add("rice")
        self.assertTrue(self.shop.cart.is_empty)

    async def test_checkout_before_open_is_refused(self) -> None:
        with self.assertRaises(CatalogNotLoadedError):
            self.shop.checkout()

    async def test_reference_order_flow(self) -> None:
        await self.shop.open_store("Mama Put")
        self.shop.add("rice")
        self.shop.add("rice")
        self.shop.add("drink")

        message = self.shop.checkout()

        self.assertEqual(self.shop.cart.total_price(), Decimal("3300"))
        self.assertIn("Total: ₦3,300", message.message_text)
        self.assertTrue(
            message.deep_link.startswith("https://wa.me/2348000000000?text=")
        )
        # Cart is kept after checkout by default
        self.assertEqual(self.shop.cart.item_count(), 3)

    async def test_unknown_product_is_validation_error(self) -> None:
        await self.shop.open_store("mama-put")
        with self.assertRaises(ValidationError):
            self.shop.add("pizza")

    async def test_not_found_keeps_previous_catalog(self) -> None:
        await self.shop.open_store("mama-put")
        self.store.fetch_vendors.return_value = []
        with self.assertRaises(NotFound):
            await self.shop.open_store("ghost")
        self.assertEqual(self.shop.vendor.id, "v1")

    async def test_transient_error_surfaces(self) -> None:
        self.store.fetch_vendors.side_effect = TransientFetchError("down")
        with self.assertRaises(TransientFetchError):
            await self.shop.open_store("mama-put")
        self.assertIsNone(self.shop.catalog)

    async def test_quantity_operations_delegate(self) -> None:
        await self.shop.open_store("mama-put")
        self.shop.add("rice")
        self.shop.increase("rice")
        self.shop.increase("rice")
        self.assertEqual(self.shop.cart.quantity_of("rice"), 3)
        self.shop.decrease("rice")
        self.assertEqual(self.shop.cart.quantity_of("rice"), 2)
        self.shop.remove("rice")
        self.assertTrue(self.shop.cart.is_empty)

    async def test_checkout_opens_browser_when_asked(self) -> None:
        await self.shop.open_store("mama-put")
        self.shop.add("rice")
        with patch("src.services.storefront.webbrowser.open") as mock_open:
            message = self.shop.checkout(open_browser=True)
        mock_open.assert_called_once_with(message.deep_link)

    async def test_checkout_with_empty_cart(self) -> None:
        await self.shop.open_store("mama-put")
        with self.assertRaises(EmptyCartError):
            self.shop.checkout()

    async def test_clear_after_checkout_only_clears_vendor_lines(self) -> None:
        shop = Storefront(
            store=self.store,
            cart_storage=self.cart_storage,
            clear_after_checkout=True,
        )
        await shop.open_store("mama-put")
        shop.add("rice")

        other = Storefront(store=_store(), cart_storage=MemoryCartStorage())
        other.store.fetch_vendors.return_value = [
            {**VENDOR_ROW, "id": "v2", "store_slug": "suya"}
        ]
        other.store.fetch_active_products.return_value = [
            {**PRODUCT_ROWS[0], "id": "suya", "vendor_id": "v2"}
        ]
        await other.open_store("suya")
        shop.cart.add_to_cart(other.product("suya"))

        shop.checkout()

        self.assertEqual(
            [it.product_id for it in shop.cart.items], ["suya"]
        )

    async def test_cart_persists_across_sessions(self) -> None:
        await self.shop.open_store("mama-put")
        self.shop.add("drink")
        again = Storefront(store=_store(), cart_storage=self.cart_storage)
        self.assertEqual(again.cart.quantity_of("drink"), 1)

    async def test_close_closes_store(self) -> None:
        self.shop.close()
        self.store.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
