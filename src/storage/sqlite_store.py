# src/storage/sqlite_store.py

"""SQLite-backed catalog store for offline shops, demos and tests."""

import json
import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.filters.slug import normalize_slug
from src.models.errors import TransientFetchError, ValidationError
from src.storage.catalog_store import CatalogStore, Row

logger = logging.getLogger("storefront.store.sqlite")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS vendors (
    id              TEXT PRIMARY KEY,
    business_name   TEXT NOT NULL,
    store_slug      TEXT NOT NULL UNIQUE,
    whatsapp_number TEXT NOT NULL,
    avatar_url      TEXT
);

CREATE TABLE IF NOT EXISTS products (
    seq         INTEGER PRIMARY KEY AUTOINCREMENT,
    id          TEXT    NOT NULL UNIQUE,
    vendor_id   TEXT    NOT NULL
                REFERENCES vendors(id) ON DELETE CASCADE,
    name        TEXT    NOT NULL,
    price       TEXT    NOT NULL,
    image_url   TEXT,
    category    TEXT,
    description TEXT,
    is_active   INTEGER NOT NULL DEFAULT 1,
    created_at  TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_products_vendor_active
    ON products(vendor_id, is_active);
"""


class SQLiteCatalogStore(CatalogStore):
    """Local vendor/product tables with the same read contract as REST."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        super().__init__("sqlite")
        path = db_path or Settings.CATALOG_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(_SCHEMA)
        logger.debug("SQLiteCatalogStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[Row]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.OperationalError as exc:
            logger.error("Catalog query failed: %s", exc, exc_info=True)
            raise TransientFetchError(str(exc)) from exc
        return [dict(r) for r in rows]

    # ── Reads ────────────────────────────────────────────

    def fetch_vendors(self, store_slug: str) -> list[Row]:
        return self._query(
            "SELECT id, business_name, store_slug, whatsapp_number, "
            "avatar_url FROM vendors WHERE store_slug = ?",
            (store_slug,),
        )

    def fetch_active_products(self, vendor_id: str) -> list[Row]:
        rows = self._query(
            "SELECT id, vendor_id, name, price, image_url, category, "
            "description, is_active FROM products "
            "WHERE vendor_id = ? AND is_active = 1 "
            "ORDER BY category, seq",
            (vendor_id,),
        )
        for row in rows:
            row["is_active"] = bool(row["is_active"])
        return rows

    def ping(self) -> None:
        self._query("SELECT 1", ())

    # ── Seeding ──────────────────────────────────────────

    def add_vendor(
        self,
        vendor_id: str,
        business_name: str,
        store_slug: str,
        whatsapp_number: str,
        avatar_url: str = "",
    ) -> None:
        """Insert or update a vendor profile.

        The slug is stored in its normalised form so lookups through the
        resolver find it.
        """
        slug = normalize_slug(store_slug)
        if not slug:
            raise ValidationError(f"Invalid store slug: {store_slug!r}")
        with self._conn:
            self._conn.execute(
                "INSERT INTO vendors (id, business_name, store_slug, "
                "whatsapp_number, avatar_url) VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET "
                "business_name=excluded.business_name, "
                "store_slug=excluded.store_slug, "
                "whatsapp_number=excluded.whatsapp_number, "
                "avatar_url=excluded.avatar_url",
                (vendor_id, business_name, slug,
                 whatsapp_number, avatar_url),
            )

    def add_product(
        self,
        product_id: str,
        vendor_id: str,
        name: str,
        price: Decimal | int | str,
        category: str = "",
        image_url: str = "",
        description: str = "",
        is_active: bool = True,
    ) -> None:
        """Insert or update a product; price is stored as exact text."""
        try:
            price_text = str(Decimal(str(price)))
        except ArithmeticError as exc:
            raise ValidationError(f"Invalid price: {price!r}") from exc
        with self._conn:
            self._conn.execute(
                "INSERT INTO products (id, vendor_id, name, price, "
                "image_url, category, description, is_active, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET "
                "name=excluded.name, price=excluded.price, "
                "image_url=excluded.image_url, category=excluded.category, "
                "description=excluded.description, "
                "is_active=excluded.is_active",
                (product_id, vendor_id, name, price_text, image_url,
                 category, description, int(is_active),
                 datetime.now().isoformat()),
            )

    def import_json(self, filepath: Path) -> tuple[int, int]:
        """Seed from a ``{"vendors": [...], "products": [...]}`` file.

        Returns ``(vendor_count, product_count)``.
        """
        with open(filepath, encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)

        vendors: list[Row] = data.get("vendors", [])
        products: list[Row] = data.get("products", [])

        for v in vendors:
            self.add_vendor(
                vendor_id=str(v["id"]),
                business_name=v["business_name"],
                store_slug=v["store_slug"],
                whatsapp_number=str(v["whatsapp_number"]),
                avatar_url=v.get("avatar_url") or "",
            )
        for p in products:
            self.add_product(
                product_id=str(p["id"]),
                vendor_id=str(p["vendor_id"]),
                name=p["name"],
                price=p["price"],
                category=p.get("category") or "",
                image_url=p.get("image_url") or "",
                description=p.get("description") or "",
                is_active=bool(p.get("is_active", True)),
            )

        logger.info(
            "Imported %d vendors and %d products from %s",
            len(vendors),
            len(products),
            filepath.name,
        )
        return len(vendors), len(products)
