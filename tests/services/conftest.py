import threading
import time

import pytest

from depthcrawl.exceptions import HttpStatusError


class FakeFetcher:
    """Serves pages from a dict; values may be a ParsedPage or an exception to raise.

    Unknown URLs answer 404. `after_fetch(url)` runs after every successful fetch.
    """

    def __init__(self, pages, delay=0.0, after_fetch=None):
        self.pages = pages
        self.delay = delay
        self.after_fetch = after_fetch
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch(self, url, is_visited=None):
        with self._lock:
            self.calls.append(url)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            result = self.pages.get(url)
            if result is None:
                raise HttpStatusError(url, 404)
            if isinstance(result, Exception):
                raise result
        finally:
            with self._lock:
                self.in_flight -= 1
        if self.after_fetch is not None:
            self.after_fetch(url)
        return result


class ListIndexer:
    def __init__(self, fail_for=()):
        self.records = []
        self.fail_for = set(fail_for)
        self._lock = threading.Lock()

    def index(self, record):
        if record.url in self.fail_for:
            raise RuntimeError("index unavailable")
        with self._lock:
            self.records.append(record)

    @property
    def urls(self):
        return sorted(r.url for r in self.records)


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def make_indexer():
    return ListIndexer
