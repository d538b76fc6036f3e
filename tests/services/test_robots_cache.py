from depthcrawl.services.robots_cache import RobotsCache
from urllib.robotparser import RobotFileParser
from unittest.mock import Mock
import threading


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_cache_miss_returns_none():
    cache = RobotsCache()
    assert cache.get("https://example.com") is None
    assert not cache.contains("https://example.com")


def test_cache_stores_and_retrieves_parser():
    cache = RobotsCache()
    parser = Mock(spec=RobotFileParser)
    cache.set("https://example.com", parser)
    assert cache.get("https://example.com") is parser


def test_cache_stores_none_for_failed_fetch():
    cache = RobotsCache()
    cache.set("https://example.com", None)
    assert cache.contains("https://example.com")
    assert cache.get("https://example.com") is None


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = RobotsCache(ttl_seconds=60, clock=clock)
    cache.set("https://example.com", Mock())
    clock.now += 60
    assert cache.contains("https://example.com")
    clock.now += 1
    assert not cache.contains("https://example.com")
    assert len(cache) == 0


def test_non_positive_ttl_disables_caching():
    cache = RobotsCache(ttl_seconds=0)
    cache.set("https://example.com", Mock())
    assert not cache.contains("https://example.com")


def test_least_recently_used_entry_is_evicted():
    cache = RobotsCache(max_size=2)
    a, b, c = Mock(), Mock(), Mock()
    cache.set("https://a.com", a)
    cache.set("https://b.com", b)
    assert cache.get("https://a.com") is a
    cache.set("https://c.com", c)
    assert len(cache) == 2
    assert not cache.contains("https://b.com")
    assert cache.get("https://a.com") is a
    assert cache.get("https://c.com") is c


def test_concurrent_writers_respect_max_size():
    cache = RobotsCache(max_size=10)

    def writer(offset):
        for i in range(50):
            cache.set(f"https://host{offset}-{i}.com", None)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(cache) == 10


def test_lookup_distinguishes_cached_none_from_miss():
    cache = RobotsCache()
    assert cache.lookup("https://example.com").hit is False
    cache.set("https://example.com", None)
    found = cache.lookup("https://example.com")
    assert found.hit is True
    assert found.parser is None
