import threading
import time
from collections import OrderedDict
from typing import NamedTuple, Optional
from urllib.robotparser import RobotFileParser


class RobotsLookup(NamedTuple):
    """Outcome of a cache lookup; `hit` distinguishes a cached `None` from a miss."""
    hit: bool
    parser: Optional[RobotFileParser] = None


_MISS = RobotsLookup(False)


class RobotsCache:
    """
    Per-host robots.txt parsers shared by every crawl thread.

    Keys are `scheme://host` strings. Entries live for `ttl_seconds` and at
    most `max_size` hosts are kept, least recently used first out. A stored
    `None` records that the host has nothing to enforce.
    """

    def __init__(self, *, max_size: int = 2048, ttl_seconds: int = 3600, clock=time.time):
        self._max_size = max(1, int(max_size if max_size is not None else 2048))
        # A non-positive TTL disables caching.
        self._ttl_seconds = max(0, int(ttl_seconds if ttl_seconds is not None else 3600))
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: "OrderedDict[str, tuple[Optional[RobotFileParser], float]]" = OrderedDict()

    def _live(self, base_url: str) -> RobotsLookup:
        # Caller holds the lock.
        entry = self._entries.get(base_url)
        if entry is None:
            return _MISS
        parser, stored_at = entry
        if self._ttl_seconds == 0 or self._clock() - stored_at > self._ttl_seconds:
            del self._entries[base_url]
            return _MISS
        self._entries.move_to_end(base_url)
        return RobotsLookup(True, parser)

    def lookup(self, base_url: str) -> RobotsLookup:
        with self._lock:
            return self._live(base_url)

    def contains(self, base_url: str) -> bool:
        return self.lookup(base_url).hit

    def get(self, base_url: str) -> Optional[RobotFileParser]:
        return self.lookup(base_url).parser

    def set(self, base_url: str, parser: Optional[RobotFileParser]) -> None:
        with self._lock:
            self._entries[base_url] = (parser, self._clock())
            self._entries.move_to_end(base_url)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
