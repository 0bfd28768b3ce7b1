"""Keyword extraction from visible page text."""

from activity_collector.keywords.extractor import extract_top_keywords, tokenize, visible_text
from activity_collector.keywords.sampler import KeywordSampler

__all__ = ["extract_top_keywords", "tokenize", "visible_text", "KeywordSampler"]
