# main.py

"""Entry point for the storefront application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Browse a vendor's catalog and order over WhatsApp.",
    )
    parser.add_argument(
        "store",
        nargs="?",
        default=None,
        help="Store slug. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-b",
        "--backend",
        choices=["rest", "sqlite"],
        default=None,
        help="Catalog store backend (default: STORE_BACKEND or sqlite).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Catalog output format (default: table).",
    )
    parser.add_argument(
        "-a",
        "--add",
        action="append",
        default=None,
        dest="add_ids",
        metavar="PRODUCT_ID",
        help="Add one unit of a product (repeatable).",
    )
    parser.add_argument(
        "--inc",
        action="append",
        default=None,
        dest="inc_ids",
        metavar="PRODUCT_ID",
        help="Increase a cart line by one (repeatable).",
    )
    parser.add_argument(
        "--dec",
        action="append",
        default=None,
        dest="dec_ids",
        metavar="PRODUCT_ID",
        help="Decrease a cart line by one (repeatable).",
    )
    parser.add_argument(
        "-r",
        "--remove",
        action="append",
        default=None,
        dest="remove_ids",
        metavar="PRODUCT_ID",
        help="Remove a cart line entirely (repeatable).",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        default=False,
        help="Empty the cart before applying other edits.",
    )
    parser.add_argument(
        "--cart",
        action="store_true",
        default=False,
        dest="show_cart",
        help="Show the cart instead of the catalog.",
    )
    parser.add_argument(
        "--checkout",
        action="store_true",
        default=False,
        help="Print the WhatsApp order message and link.",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        default=False,
        dest="open_link",
        help="With --checkout, open the link in the browser.",
    )
    parser.add_argument(
        "--import-catalog",
        default=None,
        dest="import_catalog",
        metavar="FILE",
        help="Seed the local SQLite catalog from a JSON file.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the catalog store.",
    )
    return parser


def _run_tui(backend: str | None) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import StorefrontApp

    try:
        app = StorefrontApp(backend=backend)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless store session and exit."""
    from src.cli.runner import cli_store

    exit_code = asyncio.run(
        cli_store(
            store_slug=args.store,
            output_format=args.output_format,
            add_ids=args.add_ids,
            inc_ids=args.inc_ids,
            dec_ids=args.dec_ids,
            remove_ids=args.remove_ids,
            clear=args.clear,
            show_cart=args.show_cart,
            checkout=args.checkout,
            open_link=args.open_link,
            backend=args.backend,
        )
    )
    sys.exit(exit_code)


def _run_import_catalog(filepath: str) -> None:
    """Seed the SQLite catalog store."""
    from src.cli.runner import run_import_catalog

    sys.exit(run_import_catalog(filepath))


def _run_health_check(backend: str | None) -> None:
    """Run catalog store connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check(backend))
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no store) or headless CLI (store given)."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.import_catalog:
        _run_import_catalog(args.import_catalog)
    elif args.health:
        _run_health_check(args.backend)
    elif args.store is None:
        _run_tui(args.backend)
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
