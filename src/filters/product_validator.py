# src/filters/product_validator.py

"""Product validation: parse raw store rows, refuse malformed ones."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from src.config.settings import Settings
from src.models.errors import ValidationError
from src.models.product import Product, Vendor

logger = logging.getLogger("storefront.filters")


def _text(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value).strip()


def parse_price(value: Any) -> Decimal:
    """Convert a price field to an exact, non-negative Decimal.

    Floats go through ``str()`` so ``1500.5`` becomes ``Decimal("1500.5")``
    rather than its binary expansion.  Booleans, non-numeric strings,
    NaN/infinity and negative values raise :class:`ValidationError`.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Invalid price: {value!r}")
    if isinstance(value, Decimal):
        price = value
    else:
        try:
            price = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid price: {value!r}") from exc
    if not price.is_finite():
        raise ValidationError(f"Invalid price: {value!r}")
    if price < 0:
        raise ValidationError(f"Negative price: {value!r}")
    return price


class ProductValidator:
    """Turn store rows into models, rejecting anything malformed."""

    @staticmethod
    def product_from_row(row: dict[str, Any]) -> Product:
        """Build a :class:`Product` from a store row.

        Raises:
            ValidationError: missing id/vendor/name or a bad price.
        """
        product_id = _text(row, "id")
        vendor_id = _text(row, "vendor_id")
        name = _text(row, "name")
        if not product_id:
            raise ValidationError("Product row has no id")
        if not vendor_id:
            raise ValidationError(f"Product {product_id} has no vendor_id")
        if not name:
            raise ValidationError(f"Product {product_id} has no name")

        is_active = row.get("is_active", True)
        if not isinstance(is_active, bool):
            is_active = str(is_active).strip().lower() in {"1", "true", "t"}

        return Product(
            id=product_id,
            vendor_id=vendor_id,
            name=name,
            price=parse_price(row.get("price")),
            image_url=_text(row, "image_url"),
            category=_text(row, "category") or Settings.DEFAULT_CATEGORY,
            is_active=is_active,
            description=_text(row, "description"),
        )

    @staticmethod
    def vendor_from_row(row: dict[str, Any]) -> Vendor:
        """Build a :class:`Vendor` from a profile row."""
        vendor_id = _text(row, "id")
        if not vendor_id:
            raise ValidationError("Vendor row has no id")
        return Vendor(
            id=vendor_id,
            business_name=_text(row, "business_name"),
            store_slug=_text(row, "store_slug"),
            whatsapp_number=_text(row, "whatsapp_number"),
            avatar_url=_text(row, "avatar_url"),
        )

    @staticmethod
    def validate(
        rows: list[dict[str, Any]],
    ) -> tuple[list[Product], int]:
        """Parse active product rows, dropping malformed or inactive ones.

        Returns the valid products (store order kept) and the count of
        dropped rows.
        """
        valid: list[Product] = []
        dropped = 0

        for row in rows:
            try:
                product = ProductValidator.product_from_row(row)
            except ValidationError as exc:
                logger.debug(
                    "Dropped malformed product row (id=%s): %s",
                    row.get("id"),
                    exc,
                )
                dropped += 1
                continue
            if not product.is_active:
                logger.debug(
                    "Dropped inactive product (id=%s, name=%s)",
                    product.id,
                    product.name,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d product rows",
                dropped,
            )

        return valid, dropped
