# src/services/health_checker.py

"""Catalog store connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("storefront.health")


@dataclass
class HealthResult:
    """Result of a single store probe."""

    backend: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_store(store: CatalogStore) -> HealthResult:
    """Time one cheap round-trip against *store*."""
    start = time.monotonic()
    try:
        store.ping()
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.warning(
            "Health probe for %s failed: %s",
            store.backend_name,
            exc,
            exc_info=True,
        )
        return HealthResult(
            backend=store.backend_name,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(
            backend=store.backend_name,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )
    return HealthResult(
        backend=store.backend_name,
        status="ok",
        latency_ms=elapsed_ms,
        message="",
    )


class HealthChecker:
    """Runs the probe off the event loop."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    async def check(self) -> HealthResult:
        result = await asyncio.to_thread(probe_store, self.store)
        logger.info(
            "Health check %s: %s (%.0fms) %s",
            result.backend,
            result.status,
            result.latency_ms,
            result.message,
        )
        return result
