# src/ui/app.py

"""Terminal UI for browsing a store and ordering over WhatsApp."""

import logging
from decimal import Decimal
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.config.settings import Settings
from src.models.errors import (
    NotFound,
    StorefrontError,
    TransientFetchError,
)
from src.models.product import Product
from src.services.checkout_formatter import format_amount
from src.services.storefront import Storefront
from src.storage.catalog_store import create_store

logger = logging.getLogger("storefront.ui")


def _money(amount: Decimal) -> str:
    return f"{Settings.CURRENCY_SYMBOL}{format_amount(amount)}"


class StorefrontApp(App[object]):
    """Terminal UI for a slug-addressed storefront."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add", "Add"),
        Binding("plus", "increase", "+1"),
        Binding("minus", "decrease", "-1"),
        Binding("d", "remove", "Remove"),
        Binding("x", "clear", "Clear Cart"),
        Binding("w", "checkout", "WhatsApp Checkout"),
    ]

    def __init__(
        self,
        storefront: Storefront | None = None,
        backend: str | None = None,
    ) -> None:
        super().__init__()
        self.storefront = storefront or Storefront(store=create_store(backend))
        self.catalog_products: list[Product] = []
        self.loading: bool = False

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🛍️ Storefront", id="title"),
            Horizontal(
                Input(placeholder="Store name, e.g. mama-put", id="store_input"),
                Button("Open", variant="primary", id="open_btn"),
                id="store_bar",
            ),
            Static("Enter a store to start shopping", id="status"),
            Horizontal(
                cast(
                    DataTable[str | Text],
                    DataTable(
                        id="catalog_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                ),
                cast(
                    DataTable[str | Text],
                    DataTable(id="cart_table", cursor_type="row"),
                ),
                id="tables",
            ),
            Static("", id="cart_total"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure table columns and show any persisted cart."""
        catalog_table = self.query_one("#catalog_table", DataTable)
        catalog_table.add_columns("Category", "Product", "Price")
        cart_table = self.query_one("#cart_table", DataTable)
        cart_table.add_columns("Product", "Qty", "Subtotal")
        self.populate_cart()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "open_btn":
            await self.open_store()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "store_input":
            await self.open_store()

    async def open_store(self) -> None:
        """Resolve the typed slug and fill the catalog table."""
        slug = self.query_one("#store_input", Input).value.strip()
        if not slug:
            self.notify("Please enter a store name", severity="warning")
            return

        status = self.query_one("#status", Static)
        status.update(f"⏳ Loading '{slug}'...")
        self.loading = True
        try:
            catalog = await self.storefront.open_store(slug)
        except NotFound:
            status.update(f"❌ Store '{slug}' does not exist")
            return
        except TransientFetchError as exc:
            logger.error("Catalog fetch failed: %s", exc, exc_info=True)
            status.update("⚠️ Store unreachable, press Enter to retry")
            self.notify(str(exc), severity="error")
            return
        finally:
            self.loading = False

        self.catalog_products = catalog.products
        self.populate_catalog()
        vendor = catalog.vendor
        status.update(
            f"✅ {vendor.business_name} · WhatsApp +{vendor.whatsapp_number}"
            f" · {len(self.catalog_products)} products"
        )

    def populate_catalog(self) -> None:
        """Fill the catalog table, one row per product, grouped."""
        table = self.query_one("#catalog_table", DataTable)
        table.clear()
        catalog = self.storefront.catalog
        if catalog is None:
            return
        self.catalog_products = catalog.products
        for category, products in catalog.groups.items():
            for idx, p in enumerate(products):
                table.add_row(
                    Text(category, style="bold magenta") if idx == 0 else "",
                    p.name[:50],
                    Text(_money(p.price), style="green"),
                )

    def populate_cart(self) -> None:
        """Redraw the cart table and the running total."""
        table = self.query_one("#cart_table", DataTable)
        table.clear()
        cart = self.storefront.cart
        for it in cart.items:
            table.add_row(
                it.product.name[:40],
                str(it.quantity),
                _money(it.subtotal),
            )
        total = self.query_one("#cart_total", Static)
        if cart.is_empty:
            total.update("Your cart is empty.")
        else:
            total.update(
                f"🛒 {cart.item_count()} items · Total {_money(cart.total_price())}"
            )

    def _selected_cart_product_id(self) -> str | None:
        table = self.query_one("#cart_table", DataTable)
        items = self.storefront.cart.items
        row = table.cursor_row
        if 0 <= row < len(items):
            return items[row].product_id
        return None

    def action_add(self) -> None:
        """Add the highlighted catalog product to the cart."""
        if self.loading or self.storefront.catalog is None:
            self.notify("Open a store first", severity="warning")
            return
        table = self.query_one("#catalog_table", DataTable)
        row = table.cursor_row
        if not 0 <= row < len(self.catalog_products):
            return
        product = self.catalog_products[row]
        try:
            self.storefront.add(product.id)
        except StorefrontError as exc:
            logger.error("Add to cart failed: %s", exc, exc_info=True)
            self.notify(str(exc), severity="error")
            return
        self.populate_cart()

    def action_increase(self) -> None:
        product_id = self._selected_cart_product_id()
        if product_id is not None:
            self.storefront.increase(product_id)
            self.populate_cart()

    def action_decrease(self) -> None:
        product_id = self._selected_cart_product_id()
        if product_id is not None:
            self.storefront.decrease(product_id)
            self.populate_cart()

    def action_remove(self) -> None:
        product_id = self._selected_cart_product_id()
        if product_id is not None:
            self.storefront.remove(product_id)
            self.populate_cart()

    def action_clear(self) -> None:
        self.storefront.clear()
        self.populate_cart()

    def action_checkout(self) -> None:
        """Open the WhatsApp order link for the current store."""
        try:
            message = self.storefront.checkout(open_browser=True)
        except StorefrontError as exc:
            self.notify(str(exc), severity="warning")
            return
        self.populate_cart()
        self.notify(f"Opening WhatsApp · Total {_money(message.total)}")

    def on_unmount(self) -> None:
        self.storefront.close()
