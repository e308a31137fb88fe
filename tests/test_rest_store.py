# tests/test_rest_store.py

"""Tests for the Supabase REST catalog store."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from src.config.settings import Settings
from src.models.errors import StoreError, TransientFetchError
from src.storage.rest_store import RestCatalogStore


def _resp(status: int, payload: Any = None) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    return resp


@patch("src.storage.rest_store.curl_requests.Session")
class TestRestCatalogStore(unittest.TestCase):
    """RestCatalogStore request and retry behaviour."""

    def _store(self, mock_session_cls: MagicMock) -> tuple[RestCatalogStore, MagicMock]:
        session = MagicMock()
        mock_session_cls.return_value = session
        store = RestCatalogStore(
            base_url="https://abc.supabase.co/", api_key="anon-key",
        )
        return store, session

    def test_fetch_vendors_queries_profiles(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.return_value = _resp(200, [{"id": "v1"}])

        rows = store.fetch_vendors("mama-put")

        self.assertEqual(rows, [{"id": "v1"}])
        url = session.get.call_args.args[0]
        kwargs = session.get.call_args.kwargs
        self.assertEqual(url, "https://abc.supabase.co/rest/v1/profiles")
        self.assertEqual(kwargs["params"]["store_slug"], "eq.mama-put")
        self.assertEqual(kwargs["headers"]["apikey"], "anon-key")
        self.assertEqual(
            kwargs["headers"]["Authorization"], "Bearer anon-key"
        )

    def test_fetch_products_filters_active(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.return_value = _resp(200, [])

        store.fetch_active_products("v1")

        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["vendor_id"], "eq.v1")
        self.assertEqual(params["is_active"], "eq.true")
        self.assertTrue(params["order"].startswith("category.asc"))

    def test_retries_then_succeeds(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.side_effect = [
            _resp(503), ConnectionError("reset"), _resp(200, []),
        ]
        self.assertEqual(store.fetch_vendors("x"), [])
        self.assertEqual(session.get.call_count, 3)

    def test_exhausted_retries_raise_transient(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.side_effect = TimeoutError("timed out")
        with self.assertRaises(TransientFetchError):
            store.fetch_vendors("x")
        self.assertEqual(
            session.get.call_count, store.settings.MAX_RETRIES
        )

    def test_rate_limit_is_retried(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.return_value = _resp(429)
        with self.assertRaises(TransientFetchError):
            store.fetch_vendors("x")

    def test_client_error_is_not_retried(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.return_value = _resp(401)
        with self.assertRaises(StoreError):
            store.fetch_vendors("x")
        self.assertEqual(session.get.call_count, 1)

    def test_non_list_payload_is_store_error(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.return_value = _resp(200, {"message": "oops"})
        with self.assertRaises(StoreError):
            store.fetch_vendors("x")

    def test_missing_credentials_rejected(
        self, mock_session_cls: MagicMock,
    ) -> None:
        with (
            patch.object(Settings, "SUPABASE_URL", ""),
            patch.object(Settings, "SUPABASE_ANON_KEY", ""),
            self.assertRaises(StoreError),
        ):
            RestCatalogStore()

    def test_ping_raises_on_error_status(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        session.get.return_value = _resp(500)
        with self.assertRaises(StoreError):
            store.ping()

    def test_close_closes_session(
        self, mock_session_cls: MagicMock,
    ) -> None:
        store, session = self._store(mock_session_cls)
        store.close()
        session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
