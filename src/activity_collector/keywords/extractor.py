"""Coarse keyword extraction from visible page text."""

from __future__ import annotations

import logging
import re
from collections import Counter

from activity_collector.exceptions import KeywordExtractionError

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 4
# Text nodes shorter than this (after stripping) are skipped when sampling.
MIN_TEXT_NODE_LENGTH = 5
MAX_TEXT_PIECES = 200

STOPWORDS = frozenset({
    "the", "and", "that", "this", "with", "from", "your", "for", "you", "are",
    "was", "have", "but", "not", "they", "their", "will", "what", "about", "which",
})

# Never sample text from these elements or anything nested in them.
PROTECTED_TAGS = ("input", "textarea", "select", "option")
NON_VISIBLE_TAGS = ("script", "style", "noscript", "template", "head")

# Runs of Unicode letters and digits.
_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> list[str]:
    """Lower-cased tokens that pass the length and stopword filters."""
    tokens = []
    for match in _TOKEN_RE.finditer(text or ""):
        word = match.group(0).lower()
        if len(word) < MIN_TOKEN_LENGTH or word in STOPWORDS:
            continue
        tokens.append(word)
    return tokens


def extract_top_keywords(text: str, limit: int = 10) -> list[str]:
    """Return the ``limit`` most frequent tokens of ``text``.

    Ties keep the order in which tokens first appeared. Empty or
    whitespace-only text yields an empty list.
    """
    if limit <= 0 or not text or not text.strip():
        return []
    counts = Counter(tokenize(text))
    # most_common orders equal counts by first insertion.
    return [word for word, _ in counts.most_common(limit)]


def visible_text(html: str, max_pieces: int = MAX_TEXT_PIECES) -> str:
    """Sample the visible text of an HTML page.

    Text inside form controls and ``contenteditable`` regions is excluded so
    that nothing a user typed is ever sampled.
    """
    try:
        from bs4 import BeautifulSoup
        from bs4.element import PreformattedString
    except ImportError:
        raise ImportError(
            "beautifulsoup4 is required for visible_text. "
            "Install with: pip install activity-collector"
        )

    if not html or not html.strip():
        return ""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise KeywordExtractionError(f"Failed to parse page HTML: {e}") from e

    for element in soup(list(PROTECTED_TAGS) + list(NON_VISIBLE_TAGS)):
        if not element.decomposed:
            element.decompose()
    for element in soup.find_all(attrs={"contenteditable": True}):
        if element.decomposed:
            continue
        if str(element.get("contenteditable", "")).strip().lower() != "false":
            element.decompose()

    root = soup.body or soup
    pieces: list[str] = []
    for node in root.find_all(string=True):
        # Comments, doctypes and CDATA are not rendered.
        if isinstance(node, PreformattedString):
            continue
        piece = node.strip()
        if len(piece) < MIN_TEXT_NODE_LENGTH:
            continue
        pieces.append(piece)
        if len(pieces) > max_pieces:
            break
    return " ".join(pieces)
