"""One-shot keyword sampling per page visit."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Hashable

from activity_collector.config import DEFAULT_KEYWORD_SETTLE_DELAY, DEFAULT_TOP_KEYWORDS
from activity_collector.exceptions import KeywordExtractionError
from activity_collector.keywords.extractor import extract_top_keywords, visible_text

logger = logging.getLogger(__name__)

HtmlSource = Callable[[], "str | Awaitable[str]"]


class KeywordSampler:
    """Sample keywords once per page visit, after the page has settled.

    The sampler does not watch the page for changes; a visit that was
    already sampled (or is being sampled) is skipped.

    Args:
        settle_delay: Seconds to wait before reading the page.
        limit: Maximum keywords returned per visit.
    """

    def __init__(
        self,
        settle_delay: float = DEFAULT_KEYWORD_SETTLE_DELAY,
        limit: int = DEFAULT_TOP_KEYWORDS,
    ):
        self.settle_delay = settle_delay
        self.limit = limit
        self._seen: set[Hashable] = set()

    def was_sampled(self, visit_key: Hashable) -> bool:
        return visit_key in self._seen

    def forget(self, visit_key: Hashable) -> None:
        self._seen.discard(visit_key)

    async def sample(self, visit_key: Hashable, get_html: HtmlSource) -> list[str] | None:
        """Return the visit's keywords, or None if it was already sampled."""
        if visit_key in self._seen:
            return None
        self._seen.add(visit_key)

        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)

        try:
            html = get_html()
            if inspect.isawaitable(html):
                html = await html
        except KeywordExtractionError:
            raise
        except Exception as e:
            raise KeywordExtractionError(f"Failed to read page for {visit_key!r}: {e}") from e

        keywords = extract_top_keywords(visible_text(html or ""), self.limit)
        logger.debug("Sampled %d keywords for %r", len(keywords), visit_key)
        return keywords
