from datetime import timedelta

from portfolio_client.services.cache import CacheManager


def make_cache(clock, **kwargs):
    return CacheManager(ttl=timedelta(seconds=10), clock=clock, **kwargs)


def test_value_served_until_ttl(clock):
    cache = make_cache(clock)
    cache.set("k", {"a": 1})

    clock.now = 9.999
    assert cache.get("k") == {"a": 1}

    clock.now = 10.0
    assert cache.get("k") is None


def test_expired_entries_are_evicted_lazily(clock):
    cache = make_cache(clock)
    cache.set("k", 1)

    clock.now = 20
    # nothing sweeps the entry until it is looked up
    assert "k" in cache
    assert cache.get("k") is None
    assert "k" not in cache
    assert cache.get_stats().expirations == 1


def test_set_overwrites_and_resets_expiry(clock):
    cache = make_cache(clock)
    cache.set("k", "old")

    clock.now = 8
    cache.set("k", "new")

    clock.now = 15
    assert cache.get("k") == "new"

    clock.now = 18
    assert cache.get("k") is None


def test_clear_and_delete(clock):
    cache = make_cache(clock)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.delete("a") is True
    assert cache.delete("a") is False

    cache.clear()
    assert len(cache) == 0
    assert cache.get("b") is None


def test_invalidate_by_substring(clock):
    cache = make_cache(clock)
    cache.set("https://x/api/projects:", 1)
    cache.set("https://x/api/projects/1:", 2)
    cache.set("https://x/api/portfolios:", 3)

    assert cache.invalidate("/projects") == 2
    assert len(cache) == 1


def test_unbounded_by_default(clock):
    cache = make_cache(clock)
    for i in range(500):
        cache.set(f"k{i}", i)

    assert len(cache) == 500
    assert cache.get_stats().evictions == 0


def test_max_size_evicts_oldest(clock):
    cache = make_cache(clock, max_size=2)
    cache.set("first", 1)
    clock.now = 1
    cache.set("second", 2)
    clock.now = 2
    cache.set("third", 3)

    assert "first" not in cache
    assert cache.get("second") == 2
    assert cache.get("third") == 3
    assert cache.get_stats().evictions == 1


def test_generate_key_uses_params_as_given():
    key = CacheManager.generate_key("https://x/api/projects", {"page": 1, "sort": "name"})
    swapped = CacheManager.generate_key("https://x/api/projects", {"sort": "name", "page": 1})

    assert key.startswith("https://x/api/projects:")
    assert key != swapped
    assert CacheManager.generate_key("https://x/api/projects") == "https://x/api/projects:"


def test_stats_hit_rate(clock):
    cache = make_cache(clock)
    cache.set("k", 1)
    cache.get("k")
    cache.get("missing")

    stats = cache.get_stats().to_dict()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == "50.00%"
