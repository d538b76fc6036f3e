import threading
from enum import Enum
from typing import Optional


class ClaimOutcome(Enum):
    CLAIMED = "claimed"
    ALREADY_VISITED = "already_visited"
    BLOCKED = "blocked"


class CrawlState:
    """
    Visited set and per-URL failure counters shared by every task of a crawl.

    Both maps are guarded by one lock; every method is a short critical
    section. `claim` folds "is it visited", "is it blocked" and "mark visited"
    into a single acquisition so two tasks can never both claim a URL.

    Visited URLs are never removed. A URL whose failure count reaches
    `max_failures` is blocked until a successful fetch resets its counter.
    """

    def __init__(
        self,
        max_failures: int,
        *,
        failure_counts: Optional[dict[str, int]] = None,
        lock: Optional[threading.Lock] = None,
    ):
        if max_failures < 1:
            raise ValueError("max_failures must be >= 1")
        self.max_failures = int(max_failures)
        self._lock = lock if lock is not None else threading.Lock()
        self._visited: set[str] = set()
        self._failure_counts: dict[str, int] = failure_counts if failure_counts is not None else {}

    def new_run(self) -> "CrawlState":
        """Return a state with an empty visited set that shares these failure counters."""
        return CrawlState(
            self.max_failures,
            failure_counts=self._failure_counts,
            lock=self._lock,
        )

    def _blocked(self, url: str) -> bool:
        return self._failure_counts.get(url, 0) >= self.max_failures

    def claim(self, url: str) -> ClaimOutcome:
        with self._lock:
            if url in self._visited:
                return ClaimOutcome.ALREADY_VISITED
            if self._blocked(url):
                return ClaimOutcome.BLOCKED
            self._visited.add(url)
            return ClaimOutcome.CLAIMED

    def is_visited(self, url: str) -> bool:
        with self._lock:
            return url in self._visited

    def is_blocked(self, url: str) -> bool:
        with self._lock:
            return self._blocked(url)

    def failure_count(self, url: str) -> int:
        with self._lock:
            return self._failure_counts.get(url, 0)

    def record_failure(self, url: str) -> int:
        """Increment the failure counter for `url` and return the new count."""
        with self._lock:
            count = self._failure_counts.get(url, 0) + 1
            self._failure_counts[url] = count
            return count

    def record_success(self, url: str) -> None:
        with self._lock:
            self._failure_counts[url] = 0

    @property
    def visited_count(self) -> int:
        with self._lock:
            return len(self._visited)
