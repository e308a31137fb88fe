# src/storage/rest_store.py

"""Supabase (PostgREST) catalog store over HTTPS."""

import time
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import StoreError, TransientFetchError
from src.storage.catalog_store import CatalogStore, Row


class RestCatalogStore(CatalogStore):
    """Query the ``profiles`` and ``products`` tables through PostgREST."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
    ) -> None:
        super().__init__("rest")
        self.settings = Settings()
        self.base_url = (base_url or self.settings.SUPABASE_URL).rstrip("/")
        self.api_key = api_key or self.settings.SUPABASE_ANON_KEY
        if not self.base_url or not self.api_key:
            raise StoreError(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set "
                "for the rest store backend"
            )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _headers(self) -> dict[str, str]:
        return {
            **self.settings.DEFAULT_HEADERS,
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _fetch_rows(
        self,
        table: str,
        params: dict[str, str],
    ) -> list[Row]:
        """GET a table with retries and exponential backoff.

        Connection errors, timeouts and retryable statuses (429/5xx)
        are retried ``MAX_RETRIES`` times before surfacing as
        :class:`TransientFetchError`.  Other non-200 statuses raise
        :class:`StoreError` immediately.
        """
        url = self._table_url(table)
        last_problem = "no attempts made"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    params=params,
                    headers=self._headers(),
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                last_problem = str(exc)
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    table,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
            else:
                if resp.status_code == 200:
                    data: Any = resp.json()
                    if not isinstance(data, list):
                        raise StoreError(
                            f"Unexpected payload from {table}: "
                            f"{type(data).__name__}"
                        )
                    return data
                last_problem = f"HTTP {resp.status_code}"
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    table,
                    resp.status_code,
                    attempt + 1,
                )
                if resp.status_code not in self.settings.RETRYABLE_STATUS:
                    raise StoreError(
                        f"{table} query rejected: HTTP {resp.status_code}"
                    )
            time.sleep(self.settings.RETRY_BACKOFF * (2 ** attempt))

        self.logger.error(
            "[%s] Giving up after %d attempts (%s)",
            table,
            self.settings.MAX_RETRIES,
            last_problem,
        )
        raise TransientFetchError(
            f"Catalog store unreachable ({table}): {last_problem}"
        )

    def fetch_vendors(self, store_slug: str) -> list[Row]:
        return self._fetch_rows(
            self.settings.VENDORS_TABLE,
            {"select": "*", "store_slug": f"eq.{store_slug}"},
        )

    def fetch_active_products(self, vendor_id: str) -> list[Row]:
        return self._fetch_rows(
            self.settings.PRODUCTS_TABLE,
            {
                "select": "*",
                "vendor_id": f"eq.{vendor_id}",
                "is_active": "eq.true",
                "order": "category.asc,created_at.asc",
            },
        )

    def ping(self) -> None:
        resp = self.session.get(
            self._table_url(self.settings.VENDORS_TABLE),
            params={"select": "id", "limit": "1"},
            headers=self._headers(),
            timeout=self.settings.HEALTH_TIMEOUT,
        )
        if resp.status_code != 200:
            raise StoreError(f"HTTP {resp.status_code}")

    def close(self) -> None:
        self.session.close()
