"""URL helpers: domain extraction, one-way hashing and coarse categories."""

from __future__ import annotations

import hashlib
from urllib.parse import urlparse

OTHER = "other"

# Checked in order; the first keyword found in the URL or domain wins.
CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("news", ("news", "article", "rss", "blog")),
    ("shopping", ("shop", "cart", "checkout", "product", "store")),
    ("social", ("facebook", "twitter", "instagram", "tiktok", "linkedin")),
    ("video", ("youtube", "vimeo", "stream", "player", "video")),
    ("search", ("search", "google.com", "bing.com", "duckduckgo.com")),
    ("reference", ("docs", "wikipedia", "wiki", "readthedocs", "mozilla")),
    ("communication", ("mail", "inbox", "outlook", "gmail")),
    ("forum", ("forum", "reddit", "stack")),
]

CATEGORIES = tuple(name for name, _ in CATEGORY_KEYWORDS) + (OTHER,)


def extract_domain(url: str | None) -> str | None:
    """Hostname of ``url``, or None when it has none."""
    if not url:
        return None
    try:
        hostname = urlparse(url.strip()).hostname
    except ValueError:
        return None
    return hostname or None


def hash_url(url: str | None) -> str:
    """Hex SHA-256 of the full URL; the raw URL is never stored."""
    return hashlib.sha256((url or "").encode("utf-8")).hexdigest()


def classify_url(url: str | None, domain: str | None) -> str:
    """Best-effort category from keywords in the URL or domain."""
    if not url and not domain:
        return OTHER
    u = (url or "").lower()
    d = (domain or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in u or keyword in d:
                return category
    return OTHER
