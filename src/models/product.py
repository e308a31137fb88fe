# src/models/product.py

"""Catalog data models shared by the resolver, cart and checkout."""

from dataclasses import dataclass
from decimal import Decimal

from src.config.settings import Settings


@dataclass(frozen=True)
class Vendor:
    """A store owner, addressed by a unique slug."""

    id: str
    business_name: str
    store_slug: str
    whatsapp_number: str
    avatar_url: str = ""


@dataclass(frozen=True)
class Product:
    """A single catalog entry owned by exactly one vendor.

    ``price`` is always a :class:`~decimal.Decimal`; rows coming from a
    store are converted by
    :class:`~src.filters.product_validator.ProductValidator` first.
    """

    id: str
    vendor_id: str
    name: str
    price: Decimal
    image_url: str = ""
    category: str = Settings.DEFAULT_CATEGORY
    is_active: bool = True
    description: str = ""
