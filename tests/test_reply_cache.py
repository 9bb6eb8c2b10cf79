"""Tests for the reply cache."""

from smartreplies.extension.cache import REPLY_CACHE_TTL, ReplyCache

from conftest import TickClock


def test_hit_within_ttl():
    clock = TickClock()
    cache = ReplyCache(clock=clock)
    cache.put("hello", "hi there")

    clock.advance(REPLY_CACHE_TTL - 1)

    assert cache.get("hello") == "hi there"


def test_expired_entry_absent_but_retained():
    clock = TickClock()
    cache = ReplyCache(ttl=60, clock=clock)
    cache.put("hello", "hi there")

    clock.advance(61)

    assert cache.get("hello") is None
    assert "hello" in cache
    assert len(cache) == 1


def test_put_refreshes_entry():
    clock = TickClock()
    cache = ReplyCache(ttl=60, clock=clock)
    cache.put("hello", "old")
    clock.advance(61)
    cache.put("hello", "new")

    assert cache.get("hello") == "new"
    assert len(cache) == 1


def test_keys_not_normalized():
    cache = ReplyCache(clock=TickClock())
    cache.put("Hello", "reply")
    assert cache.get("hello") is None
    assert cache.get("Hello ") is None


def test_empty_cache_is_truthy():
    cache = ReplyCache(clock=TickClock())
    assert len(cache) == 0
    assert cache
