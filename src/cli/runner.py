# src/cli/runner.py

"""Headless CLI storefront: browse a catalog, edit the cart, check out."""

import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.cart_item import CartLineItem
from src.models.errors import (
    NotFound,
    StorefrontError,
    TransientFetchError,
)
from src.services.catalog_resolver import StoreCatalog
from src.services.checkout_formatter import format_amount
from src.services.storefront import Storefront
from src.storage.catalog_store import create_store

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2
EXIT_TRANSIENT = 3


def _money(amount: Decimal) -> str:
    return f"{Settings.CURRENCY_SYMBOL}{format_amount(amount)}"


def _catalog_to_dict(catalog: StoreCatalog) -> dict[str, object]:
    """Serialise a resolved catalog to plain data for JSON output."""
    v = catalog.vendor
    return {
        "vendor": {
            "id": v.id,
            "business_name": v.business_name,
            "store_slug": v.store_slug,
            "whatsapp_number": v.whatsapp_number,
        },
        "groups": {
            category: [
                {
                    "id": p.id,
                    "name": p.name,
                    "price": str(p.price),
                    "image_url": p.image_url,
                }
                for p in products
            ]
            for category, products in catalog.groups.items()
        },
    }


def _print_catalog(catalog: StoreCatalog) -> None:
    """Render the grouped catalog as a Rich table."""
    vendor = catalog.vendor
    table = Table(
        title=f"{vendor.business_name} (WhatsApp: +{vendor.whatsapp_number})",
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Product", max_width=50)
    table.add_column("Price", justify="right", style="green")

    for category, products in catalog.groups.items():
        table.add_section()
        table.add_row("", f"[bold magenta]{category}[/bold magenta]", "")
        for p in products:
            table.add_row(p.id, p.name, _money(p.price))

    Console().print(table)


def _print_cart(items: tuple[CartLineItem, ...], total: Decimal) -> None:
    """Render the cart as a Rich table with a total footer."""
    table = Table(
        title=f"Your Cart ({sum(i.quantity for i in items)})",
        title_style="bold cyan",
        show_footer=True,
    )
    table.add_column("ID", style="dim")
    table.add_column("Product", max_width=50, footer="Total")
    table.add_column("Qty", justify="center")
    table.add_column(
        "Subtotal", justify="right", style="green", footer=_money(total),
    )
    for it in items:
        table.add_row(
            it.product_id, it.product.name, str(it.quantity),
            _money(it.subtotal),
        )
    Console().print(table)


async def cli_store(
    store_slug: str,
    output_format: str = "table",
    add_ids: list[str] | None = None,
    inc_ids: list[str] | None = None,
    dec_ids: list[str] | None = None,
    remove_ids: list[str] | None = None,
    clear: bool = False,
    show_cart: bool = False,
    checkout: bool = False,
    open_link: bool = False,
    backend: str | None = None,
) -> int:
    """Open a store, apply cart edits in order, and report.

    Returns an exit code: 0 ok, 1 error, 2 store not found,
    3 store unreachable.
    """
    try:
        storefront = Storefront(store=create_store(backend))
    except StorefrontError as exc:
        _err.print(f"[red]{exc}[/red]")
        return EXIT_ERROR

    try:
        _err.print(f"[bold]Opening store:[/bold] {store_slug}")
        try:
            catalog = await storefront.open_store(store_slug)
        except NotFound as exc:
            _err.print(f"[red]{exc}[/red]")
            return EXIT_NOT_FOUND
        except TransientFetchError as exc:
            logger.error("Store fetch failed: %s", exc, exc_info=True)
            _err.print(f"[yellow]Store unreachable, try again: {exc}[/yellow]")
            return EXIT_TRANSIENT

        if catalog.dropped_count:
            _err.print(
                f"[dim]{catalog.dropped_count} malformed products hidden[/dim]"
            )

        try:
            if clear:
                storefront.clear()
            for pid in add_ids or []:
                product = storefront.add(pid)
                _err.print(f"[green]+ {product.name}[/green]")
            for pid in inc_ids or []:
                storefront.increase(pid)
            for pid in dec_ids or []:
                storefront.decrease(pid)
            for pid in remove_ids or []:
                storefront.remove(pid)
        except StorefrontError as exc:
            logger.error("Cart update failed: %s", exc, exc_info=True)
            _err.print(f"[red]{exc}[/red]")
            return EXIT_ERROR

        if checkout:
            try:
                message = storefront.checkout(open_browser=open_link)
            except StorefrontError as exc:
                _err.print(f"[yellow]{exc}[/yellow]")
                return EXIT_ERROR
            sys.stdout.write(message.message_text + "\n\n")
            sys.stdout.write(message.deep_link + "\n")
            return EXIT_OK

        if show_cart or add_ids or inc_ids or dec_ids or remove_ids or clear:
            if storefront.cart.is_empty:
                _err.print("[dim]Your cart is empty.[/dim]")
            else:
                _print_cart(
                    storefront.cart.items, storefront.cart.total_price(),
                )
            return EXIT_OK

        if output_format == "table":
            _print_catalog(catalog)
        else:
            json.dump(
                _catalog_to_dict(catalog),
                sys.stdout,
                ensure_ascii=False,
                indent=2,
            )
            sys.stdout.write("\n")
        return EXIT_OK
    finally:
        storefront.close()


def run_import_catalog(filepath: str) -> int:
    """Seed the local SQLite catalog from a JSON export."""
    from src.storage.sqlite_store import SQLiteCatalogStore

    path = Path(filepath)
    if not path.exists():
        _err.print(f"[red]File not found: {path}[/red]")
        return EXIT_ERROR

    store = SQLiteCatalogStore()
    try:
        vendors, products = store.import_json(path)
    except (KeyError, ValueError, StorefrontError) as exc:
        logger.error("Catalog import failed: %s", exc, exc_info=True)
        _err.print(f"[red]Import failed: {exc}[/red]")
        return EXIT_ERROR
    finally:
        store.close()

    _err.print(
        f"[green]✓ Imported {vendors} vendors and {products} products[/green]"
    )
    return EXIT_OK


async def run_health_check(backend: str | None = None) -> int:
    """Probe the configured catalog store and print the result."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running catalog store health check...[/bold]")
    try:
        store = create_store(backend)
    except StorefrontError as exc:
        _err.print(f"[red]{exc}[/red]")
        return EXIT_ERROR

    try:
        result = await HealthChecker(store).check()
    finally:
        store.close()

    table = Table(
        title="Catalog Store Health",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Backend", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    if result.status == "ok":
        status = "[green]✅ OK[/green]"
    elif result.status == "slow":
        status = "[yellow]⚠️  SLOW[/yellow]"
    else:
        status = "[red]❌ DOWN[/red]"

    latency = f"{result.latency_ms:.0f}ms" if result.latency_ms > 0 else "—"
    table.add_row(result.backend, status, latency, result.message)

    Console().print(table)
    return EXIT_ERROR if result.status == "down" else EXIT_OK
