# src/services/cart_engine.py

"""Shopping cart state engine with durable snapshots."""

import logging
import threading
from decimal import Decimal

from src.config.settings import Settings
from src.models.cart_item import CartLineItem
from src.models.errors import ValidationError
from src.models.product import Product
from src.storage.cart_storage import CartStorage

logger = logging.getLogger("storefront.cart")


def _check_product(product: object) -> Product:
    """Refuse anything that is not a well-formed :class:`Product`."""
    if not isinstance(product, Product):
        raise ValidationError(
            f"Expected a Product, got {type(product).__name__}"
        )
    if not isinstance(product.price, Decimal) or not product.price.is_finite():
        raise ValidationError(
            f"Product {product.id} has a non-decimal price: {product.price!r}"
        )
    if product.price < 0:
        raise ValidationError(
            f"Product {product.id} has a negative price: {product.price}"
        )
    if not product.id:
        raise ValidationError("Product has no id")
    if not product.is_active:
        raise ValidationError(f"Product {product.id} is not on sale")
    return product


class CartEngine:
    """Ordered line items, merged by product id, saved after every change.

    The cart is global to the client: products from several vendors may
    sit side by side, and checkout picks out one vendor's lines.  Each
    mutation rewrites the whole snapshot for ``namespace`` before it
    returns.  Two engines sharing a namespace overwrite each other
    (last write wins).
    """

    def __init__(
        self,
        storage: CartStorage,
        namespace: str | None = None,
    ) -> None:
        self.storage = storage
        self.namespace = namespace or Settings.CART_NAMESPACE
        self._lock = threading.RLock()
        self._items: list[CartLineItem] = storage.load(self.namespace)
        logger.debug(
            "Cart '%s' loaded with %d lines",
            self.namespace,
            len(self._items),
        )

    # ── Private helpers ──────────────────────────────────

    def _index_of(self, product_id: str) -> int | None:
        for idx, item in enumerate(self._items):
            if item.product_id == product_id:
                return idx
        return None

    def _commit(self, items: list[CartLineItem]) -> None:
        self.storage.save(self.namespace, items)
        self._items = items

    # ── Mutations ────────────────────────────────────────

    def add_to_cart(self, product: Product) -> None:
        """Add one unit; repeated adds grow the existing line."""
        product = _check_product(product)
        with self._lock:
            items = list(self._items)
            idx = self._index_of(product.id)
            if idx is None:
                items.append(CartLineItem(product=product, quantity=1))
            else:
                items[idx] = items[idx].with_quantity(items[idx].quantity + 1)
            self._commit(items)
        logger.info("Added %s (%s) to cart", product.id, product.name)

    def increase_quantity(self, product_id: str) -> None:
        with self._lock:
            idx = self._index_of(product_id)
            if idx is None:
                return
            items = list(self._items)
            items[idx] = items[idx].with_quantity(items[idx].quantity + 1)
            self._commit(items)

    def decrease_quantity(self, product_id: str) -> None:
        """Drop one unit, removing the line instead of keeping zero."""
        with self._lock:
            idx = self._index_of(product_id)
            if idx is None:
                return
            items = list(self._items)
            if items[idx].quantity > 1:
                items[idx] = items[idx].with_quantity(items[idx].quantity - 1)
            else:
                del items[idx]
                logger.info("Removed %s from cart (quantity hit 0)", product_id)
            self._commit(items)

    def remove_from_cart(self, product_id: str) -> None:
        with self._lock:
            idx = self._index_of(product_id)
            if idx is None:
                return
            items = list(self._items)
            del items[idx]
            self._commit(items)
        logger.info("Removed %s from cart", product_id)

    def clear_cart(self) -> None:
        with self._lock:
            self._commit([])
        logger.info("Cart '%s' cleared", self.namespace)

    # ── Derived values ───────────────────────────────────

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        """Read-only view of the current lines in insertion order."""
        return tuple(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def quantity_of(self, product_id: str) -> int:
        idx = self._index_of(product_id)
        return 0 if idx is None else self._items[idx].quantity

    def total_price(self) -> Decimal:
        """Exact sum of ``price * quantity`` over every line."""
        return sum(
            (item.subtotal for item in self._items), Decimal(0)
        )

    def item_count(self) -> int:
        """Total units in the cart (the badge number)."""
        return sum(item.quantity for item in self._items)

    def vendor_ids(self) -> list[str]:
        """Distinct vendor ids in order of first appearance."""
        seen: list[str] = []
        for item in self._items:
            if item.product.vendor_id not in seen:
                seen.append(item.product.vendor_id)
        return seen

    def items_for_vendor(self, vendor_id: str) -> list[CartLineItem]:
        return [
            item for item in self._items
            if item.product.vendor_id == vendor_id
        ]
