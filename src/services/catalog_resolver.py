# src/services/catalog_resolver.py

"""Resolve a store slug into its vendor and category-grouped catalog."""

import logging
from dataclasses import dataclass, field

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.filters.slug import normalize_slug
from src.models.errors import NotFound, ValidationError
from src.models.product import Product, Vendor
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("storefront.resolver")


def group_by_category(
    products: list[Product],
) -> dict[str, list[Product]]:
    """Partition products into display groups keyed by category.

    Groups appear in order of first occurrence and keep the incoming
    product order inside each group.  A blank category falls into the
    default group.
    """
    groups: dict[str, list[Product]] = {}
    for product in products:
        key = product.category.strip() or Settings.DEFAULT_CATEGORY
        groups.setdefault(key, []).append(product)
    return groups


@dataclass
class StoreCatalog:
    """A resolved vendor with its active products grouped for display."""

    vendor: Vendor
    groups: dict[str, list[Product]] = field(
        default_factory=lambda: dict[str, list[Product]]()
    )
    dropped_count: int = 0

    @property
    def products(self) -> list[Product]:
        return [p for group in self.groups.values() for p in group]

    def find(self, product_id: str) -> Product | None:
        for group in self.groups.values():
            for product in group:
                if product.id == product_id:
                    return product
        return None


class CatalogResolver:
    """Looks up one vendor by slug and loads its active catalog."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def resolve(self, store_slug: str) -> StoreCatalog:
        """Resolve *store_slug* to a :class:`StoreCatalog`.

        Raises:
            NotFound: no vendor, or more than one, matches the slug.
            TransientFetchError: the store could not be reached.
        """
        slug = normalize_slug(store_slug)
        if not slug:
            raise NotFound(store_slug)

        vendor_rows = self.store.fetch_vendors(slug)
        if len(vendor_rows) != 1:
            logger.info(
                "Slug '%s' matched %d vendors, treating as not found",
                slug,
                len(vendor_rows),
            )
            raise NotFound(slug)

        try:
            vendor = ProductValidator.vendor_from_row(vendor_rows[0])
        except ValidationError as exc:
            logger.error(
                "Vendor row for '%s' is malformed: %s", slug, exc,
            )
            raise NotFound(slug) from exc

        rows = self.store.fetch_active_products(vendor.id)
        products, dropped = ProductValidator.validate(rows)
        foreign = [p for p in products if p.vendor_id != vendor.id]
        if foreign:
            logger.warning(
                "Store returned %d products owned by other vendors "
                "for '%s'; ignoring them",
                len(foreign),
                slug,
            )
            products = [p for p in products if p.vendor_id == vendor.id]
            dropped += len(foreign)

        catalog = StoreCatalog(
            vendor=vendor,
            groups=group_by_category(products),
            dropped_count=dropped,
        )
        logger.info(
            "Resolved '%s' -> %s (%d products in %d groups, %d dropped)",
            slug,
            vendor.business_name,
            len(products),
            len(catalog.groups),
            dropped,
        )
        return catalog
