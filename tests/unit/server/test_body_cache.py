"""Tests for the body payload cache."""

from impactsim.server.body_cache import BodyCache


def _builder(calls, tag):
    def build():
        calls.append(tag)
        return {"tag": tag}

    return build


def test_second_lookup_is_a_hit():
    cache = BodyCache(max_size=4)
    calls = []
    first = cache.get_or_build({"diameter": 10.0}, _builder(calls, "a"))
    second = cache.get_or_build({"diameter": 10.0}, _builder(calls, "b"))
    assert first is second
    assert calls == ["a"]
    assert cache.stats() == {"entries": 1, "hits": 1, "misses": 1}


def test_key_ignores_input_order():
    assert BodyCache.key_for({"a": 1, "b": 2}) == BodyCache.key_for({"b": 2, "a": 1})
    assert BodyCache.key_for({"a": 1}) != BodyCache.key_for({"a": 2})


def test_least_recently_used_is_evicted():
    cache = BodyCache(max_size=2)
    calls = []
    cache.get_or_build({"n": 1}, _builder(calls, 1))
    cache.get_or_build({"n": 2}, _builder(calls, 2))
    # Touch 1 so 2 becomes the eviction candidate
    cache.get_or_build({"n": 1}, _builder(calls, "x"))
    cache.get_or_build({"n": 3}, _builder(calls, 3))
    assert len(cache) == 2

    cache.get_or_build({"n": 1}, _builder(calls, "y"))
    cache.get_or_build({"n": 2}, _builder(calls, "rebuilt"))
    assert calls == [1, 2, 3, "rebuilt"]


def test_clear_resets_counters():
    cache = BodyCache(max_size=2)
    cache.get_or_build({"n": 1}, lambda: {})
    cache.clear()
    assert len(cache) == 0
    assert cache.stats() == {"entries": 0, "hits": 0, "misses": 0}
