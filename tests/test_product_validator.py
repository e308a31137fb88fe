# tests/test_product_validator.py

"""Tests for ProductValidator row parsing."""

import unittest
from decimal import Decimal
from typing import Any

from src.filters.product_validator import ProductValidator, parse_price
from src.models.errors import ValidationError


def _row(**overrides: Any) -> dict[str, Any]:
    """Build a well-formed product row, with overrides."""
    row: dict[str, Any] = {
        "id": "p1",
        "vendor_id": "v1",
        "name": "Jollof Rice",
        "price": 1500,
        "image_url": "https://cdn.example.com/rice.jpg",
        "category": "Meals",
        "is_active": True,
    }
    row.update(overrides)
    return row


class TestParsePrice(unittest.TestCase):
    """Exact decimal price parsing."""

    def test_int(self) -> None:
        self.assertEqual(parse_price(1500), Decimal("1500"))

    def test_float_goes_through_str(self) -> None:
        self.assertEqual(parse_price(0.1), Decimal("0.1"))

    def test_numeric_string(self) -> None:
        self.assertEqual(parse_price(" 12.50 "), Decimal("12.50"))

    def test_rejects_non_numeric(self) -> None:
        with self.assertRaises(ValidationError):
            parse_price("twelve")

    def test_rejects_negative(self) -> None:
        with self.assertRaises(ValidationError):
            parse_price("-5")

    def test_rejects_none_and_bool(self) -> None:
        for value in (None, True, False):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    parse_price(value)

    def test_rejects_nan_and_infinity(self) -> None:
        for value in ("NaN", "Infinity", float("inf")):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    parse_price(value)


class TestProductFromRow(unittest.TestCase):
    """Single row conversion."""

    def test_full_row(self) -> None:
        product = ProductValidator.product_from_row(_row())
        self.assertEqual(product.id, "p1")
        self.assertEqual(product.price, Decimal("1500"))
        self.assertEqual(product.category, "Meals")
        self.assertTrue(product.is_active)

    def test_missing_category_defaults_to_general(self) -> None:
        for value in (None, "", "   "):
            with self.subTest(value=value):
                product = ProductValidator.product_from_row(
                    _row(category=value)
                )
                self.assertEqual(product.category, "General")

    def test_missing_image_is_empty_string(self) -> None:
        product = ProductValidator.product_from_row(_row(image_url=None))
        self.assertEqual(product.image_url, "")

    def test_missing_name_raises(self) -> None:
        with self.assertRaises(ValidationError):
            ProductValidator.product_from_row(_row(name="  "))

    def test_missing_id_raises(self) -> None:
        with self.assertRaises(ValidationError):
            ProductValidator.product_from_row(_row(id=None))

    def test_integer_is_active_from_sqlite(self) -> None:
        product = ProductValidator.product_from_row(_row(is_active=0))
        self.assertFalse(product.is_active)

    def test_vendor_from_row(self) -> None:
        vendor = ProductValidator.vendor_from_row({
            "id": "v1",
            "business_name": "Mama Put",
            "store_slug": "mama-put",
            "whatsapp_number": 2348000000000,
        })
        self.assertEqual(vendor.whatsapp_number, "2348000000000")
        self.assertEqual(vendor.avatar_url, "")


class TestValidate(unittest.TestCase):
    """Batch validation keeps order and counts drops."""

    def test_drops_malformed_and_inactive(self) -> None:
        rows = [
            _row(id="a"),
            _row(id="b", price="abc"),
            _row(id="c", is_active=False),
            _row(id="d", price=-1),
            _row(id="e"),
        ]
        valid, dropped = ProductValidator.validate(rows)
        self.assertEqual([p.id for p in valid], ["a", "e"])
        self.assertEqual(dropped, 3)

    def test_empty_input(self) -> None:
        self.assertEqual(ProductValidator.validate([]), ([], 0))


if __name__ == "__main__":
    unittest.main()
