# src/filters/slug.py

"""Store slug normalisation applied once at the resolver boundary."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_slug(raw: str) -> str:
    """Normalise a store slug to its canonical lookup key.

    Trims surrounding whitespace, lowercases, and collapses every run of
    inner whitespace into a single hyphen, the same transform vendors
    see when they pick a slug at sign-up.  ``"Mama Put "`` and
    ``"mama-put"`` therefore resolve to the same store.
    """
    if not raw:
        return ""
    return _WHITESPACE_RE.sub("-", raw.strip().lower())
