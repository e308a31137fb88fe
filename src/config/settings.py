# src/config/settings.py

"""Central configuration for the storefront engine."""

import os
from pathlib import Path
from typing import cast

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()

_BASE_DIR = Path(__file__).resolve().parent.parent.parent


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_path(name: str, default: Path) -> Path:
    """Resolve *name* as a path; relative values sit under the repo root."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    path = Path(raw).expanduser()
    return path if path.is_absolute() else _BASE_DIR / path


class Settings:
    """Central configuration for the storefront engine."""

    # --- Catalog store ---
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sqlite")  # "rest" | "sqlite"
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    VENDORS_TABLE: str = "profiles"
    PRODUCTS_TABLE: str = "products"

    # --- HTTP ---
    REQUEST_TIMEOUT: int = _env_int("REQUEST_TIMEOUT", 15)  # Seconds before a request times out
    MAX_RETRIES: int = _env_int("MAX_RETRIES", 3)  # Retry count on transient failures
    RETRY_BACKOFF: float = _env_float("RETRY_BACKOFF", 1.0)  # Base seconds, doubled per attempt
    RETRYABLE_STATUS: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    IMPERSONATE_BROWSER: BrowserTypeLiteral = cast(
        BrowserTypeLiteral, os.getenv("IMPERSONATE_BROWSER", "chrome131")
    )
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Health ---
    HEALTH_TIMEOUT: int = 10            # Seconds per probe
    # Latency above this is "slow"
    HEALTH_SLOW_MS: float = _env_float("HEALTH_SLOW_MS", 5000.0)

    # --- Cart ---
    CART_NAMESPACE: str = os.getenv("CART_NAMESPACE", "whatsstore-cart")
    CART_SNAPSHOT_VERSION: int = 1

    # --- Catalog display ---
    DEFAULT_CATEGORY: str = os.getenv("DEFAULT_CATEGORY", "General")

    # --- Checkout ---
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₦")
    WHATSAPP_BASE_URL: str = os.getenv(
        "WHATSAPP_BASE_URL", "https://wa.me"
    ).rstrip("/")
    LINE_MARKER: str = "▪️"
    CONFIRMATION_LINE: str = "Please confirm my order."

    # --- Paths ---
    BASE_DIR: Path = _BASE_DIR
    DATA_DIR: Path = BASE_DIR / "data"
    CART_DIR: Path = _env_path("CART_DIR", DATA_DIR / "carts")
    CATALOG_DB_PATH: Path = _env_path("CATALOG_DB_PATH", DATA_DIR / "catalog.db")
    LOGS_DIR: Path = _env_path("LOGS_DIR", BASE_DIR / "logs")
