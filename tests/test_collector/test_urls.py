"""Tests for URL helpers."""

from activity_collector.collector.urls import classify_url, extract_domain, hash_url


def test_extract_domain():
    assert extract_domain("https://www.Example.com:8443/path?q=1") == "www.example.com"
    assert extract_domain("chrome://newtab") == "newtab"
    assert extract_domain("not a url") is None
    assert extract_domain("") is None
    assert extract_domain(None) is None


def test_hash_url_is_sha256_hex():
    digest = hash_url("https://a.com/")
    assert len(digest) == 64
    assert digest == hash_url("https://a.com/")
    assert digest != hash_url("https://a.com/other")


def test_classify_url():
    assert classify_url("https://www.reddit.com/r/python", "www.reddit.com") == "forum"
    assert classify_url("https://shop.example/cart", "shop.example") == "shopping"
    assert classify_url("https://www.youtube.com/watch", "www.youtube.com") == "video"
    assert classify_url("https://example.org/", "example.org") == "other"
    assert classify_url(None, None) == "other"


def test_classify_first_match_wins():
    # "news" is checked before "video"
    assert classify_url("https://video.news.example/", None) == "news"
