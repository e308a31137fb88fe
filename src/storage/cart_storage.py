# src/storage/cart_storage.py

"""Durable cart snapshots keyed by a fixed namespace."""

import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.models.cart_item import CartLineItem
from src.models.errors import ValidationError

logger = logging.getLogger("storefront.storage")

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]")


def items_to_snapshot(items: list[CartLineItem]) -> dict[str, Any]:
    """Serialise line items into the persisted snapshot layout.

    Prices are written as strings so a reload restores the exact
    Decimal that was saved.
    """
    return {
        "version": Settings.CART_SNAPSHOT_VERSION,
        "state": {
            "cart": [
                {
                    "id": it.product.id,
                    "vendor_id": it.product.vendor_id,
                    "name": it.product.name,
                    "price": str(it.product.price),
                    "image_url": it.product.image_url,
                    "category": it.product.category,
                    "description": it.product.description,
                    "is_active": it.product.is_active,
                    "quantity": it.quantity,
                }
                for it in items
            ]
        },
    }


def items_from_snapshot(snapshot: dict[str, Any]) -> list[CartLineItem]:
    """Rebuild line items, dropping entries that break cart invariants.

    Entries with a bad product, a non-integer or non-positive quantity,
    or a product id already seen earlier in the snapshot are skipped.
    """
    state = snapshot.get("state", {})
    if not isinstance(state, dict):
        raise ValidationError("Snapshot 'state' is not an object")
    entries = state.get("cart", [])
    if not isinstance(entries, list):
        raise ValidationError("Snapshot 'cart' is not a list")

    items: list[CartLineItem] = []
    seen: set[str] = set()
    for entry in entries:
        try:
            product = ProductValidator.product_from_row(entry)
        except (ValidationError, AttributeError) as exc:
            logger.warning("Skipped unreadable cart entry: %s", exc)
            continue
        quantity = entry.get("quantity")
        if (
            not isinstance(quantity, int)
            or isinstance(quantity, bool)
            or quantity < 1
        ):
            logger.warning(
                "Skipped cart entry %s with quantity %r",
                product.id,
                quantity,
            )
            continue
        if product.id in seen:
            logger.warning("Skipped duplicate cart entry %s", product.id)
            continue
        seen.add(product.id)
        items.append(CartLineItem(product=product, quantity=quantity))
    return items


class CartStorage(ABC):
    """Load/save boundary for cart snapshots."""

    @abstractmethod
    def load(self, namespace: str) -> list[CartLineItem]:
        """Return the saved cart, or an empty list when none exists."""
        ...

    @abstractmethod
    def save(self, namespace: str, items: list[CartLineItem]) -> None:
        """Durably replace the snapshot for *namespace*."""
        ...


class MemoryCartStorage(CartStorage):
    """Process-local storage; snapshots survive engine re-creation only."""

    def __init__(self) -> None:
        self._snapshots: dict[str, dict[str, Any]] = {}
        self.save_count = 0

    def load(self, namespace: str) -> list[CartLineItem]:
        snapshot = self._snapshots.get(namespace)
        if snapshot is None:
            return []
        return items_from_snapshot(snapshot)

    def save(self, namespace: str, items: list[CartLineItem]) -> None:
        self._snapshots[namespace] = items_to_snapshot(items)
        self.save_count += 1


class JsonCartStorage(CartStorage):
    """One JSON file per namespace, replaced atomically on every save."""

    def __init__(self, cart_dir: Path | None = None) -> None:
        self.cart_dir: Path = cart_dir or Settings.CART_DIR
        self.cart_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("JsonCartStorage initialised, cart_dir=%s", self.cart_dir)

    def path_for(self, namespace: str) -> Path:
        safe = _UNSAFE_NAME_RE.sub("_", namespace) or "cart"
        return self.cart_dir / f"{safe}.json"

    def load(self, namespace: str) -> list[CartLineItem]:
        filepath = self.path_for(namespace)
        if not filepath.exists():
            return []
        try:
            with open(filepath, encoding="utf-8") as f:
                snapshot: Any = json.load(f)
            if not isinstance(snapshot, dict):
                raise ValidationError("Snapshot root is not an object")
            items = items_from_snapshot(snapshot)
        except (
            OSError, ValueError, RecursionError, ValidationError,
        ) as exc:
            logger.warning(
                "Cart snapshot %s unreadable, starting empty: %s",
                filepath,
                exc,
                exc_info=True,
            )
            return []
        logger.debug(
            "Loaded %d cart lines from %s", len(items), filepath,
        )
        return items

    def save(self, namespace: str, items: list[CartLineItem]) -> None:
        filepath = self.path_for(namespace)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.cart_dir, prefix=f".{filepath.stem}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(
                    items_to_snapshot(items), f,
                    ensure_ascii=False, indent=2,
                )
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, filepath)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved %d cart lines to %s", len(items), filepath)
