# src/models/cart_item.py

"""Cart line item model."""

from dataclasses import dataclass, replace
from decimal import Decimal

from src.models.product import Product


@dataclass(frozen=True)
class CartLineItem:
    """A product plus the quantity the shopper selected (always >= 1)."""

    product: Product
    quantity: int = 1

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def subtotal(self) -> Decimal:
        """Exact ``price * quantity`` for this line."""
        return self.product.price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return replace(self, quantity=quantity)
