# tests/test_slug.py

"""Tests for store slug normalisation."""

import unittest

from src.filters.slug import normalize_slug


class TestNormalizeSlug(unittest.TestCase):
    """normalize_slug unit tests."""

    def test_lowercases(self) -> None:
        self.assertEqual(normalize_slug("MamaPut"), "mamaput")

    def test_spaces_become_hyphens(self) -> None:
        self.assertEqual(normalize_slug("Mama Put"), "mama-put")

    def test_whitespace_runs_collapse(self) -> None:
        self.assertEqual(normalize_slug("mama \t  put"), "mama-put")

    def test_trims_ends(self) -> None:
        self.assertEqual(normalize_slug("  mama-put  "), "mama-put")

    def test_already_normal_is_unchanged(self) -> None:
        self.assertEqual(normalize_slug("mama-put"), "mama-put")

    def test_idempotent(self) -> None:
        once = normalize_slug(" Big  Shop ")
        self.assertEqual(normalize_slug(once), once)

    def test_empty_and_blank(self) -> None:
        self.assertEqual(normalize_slug(""), "")
        self.assertEqual(normalize_slug("   "), "")


if __name__ == "__main__":
    unittest.main()
