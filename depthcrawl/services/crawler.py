import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from depthcrawl.domain.crawl_result import CrawlResult
from depthcrawl.domain.crawl_state import ClaimOutcome, CrawlState
from depthcrawl.domain.page_record import PageRecord
from depthcrawl.domain.wait_group import WaitGroup
from depthcrawl.exceptions import HttpFetchError, RobotsDisallowedError
from depthcrawl.services.keyword_extractor import extract_keywords
from depthcrawl.services.page_fetcher import Fetcher
from depthcrawl.services.protocols import Indexer
from depthcrawl.services.robots_policy import RobotsPolicy

logger = logging.getLogger(__name__)
visit_logger = logging.getLogger("depthcrawl.visits")


class _CrawlRun:
    """Per-invocation bookkeeping: the shared state, the sink, the pool and the join counter."""

    def __init__(self, state: CrawlState, indexer: Indexer, stop_event, executor: ThreadPoolExecutor):
        self.state = state
        self.indexer = indexer
        self.stop_event = stop_event
        self.executor = executor
        self.tasks = WaitGroup()
        self._lock = threading.Lock()
        self.pages_indexed = 0
        self.pages_failed = 0
        self.stopped = False

    def is_stopped(self) -> bool:
        return self.stop_event is not None and self.stop_event.is_set()

    def count(self, *, indexed: int = 0, failed: int = 0, stopped: bool = False) -> None:
        with self._lock:
            self.pages_indexed += indexed
            self.pages_failed += failed
            self.stopped = self.stopped or stopped

    def result(self) -> CrawlResult:
        with self._lock:
            return CrawlResult(pages_indexed=self.pages_indexed, pages_failed=self.pages_failed, stopped=self.stopped)


class Crawler:
    """Concurrent, depth-limited crawler.

    `crawl(url, depth, indexer)` returns once every page reachable from `url`
    within `depth_limit` hops has been handled. Each page is a task on a
    bounded thread pool; a page's links are submitted as new tasks at
    `depth + 1`. Every task is registered on the run's `WaitGroup` before it
    is submitted and released when it returns, so the top-level call waits
    for the whole subtree without any task blocking a worker on its children.

    Visited URLs and failure counters live in a `CrawlState` owned by the
    crawler. With `reset_per_run` each top-level call starts with an empty
    visited set but keeps the failure counters, so a failing URL gets another
    try on the next run until its circuit breaker trips.
    """

    def __init__(
        self,
        *,
        page_fetcher: Fetcher,
        robots_policy: RobotsPolicy,
        depth_limit: int,
        max_failures: int = 5,
        max_workers: int = 16,
        max_in_flight_fetches: Optional[int] = None,
        reset_per_run: bool = False,
        indexer: Optional[Indexer] = None,
        state: Optional[CrawlState] = None,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.page_fetcher = page_fetcher
        self.robots_policy = robots_policy
        self.depth_limit = int(depth_limit)
        self.max_workers = int(max_workers)
        self.max_in_flight_fetches = int(max_in_flight_fetches or max_workers)
        self.reset_per_run = bool(reset_per_run)
        self.indexer = indexer
        self.state = state if state is not None else CrawlState(max_failures)
        # Shared by all runs of this crawler so overlapping runs respect one fetch cap.
        self._fetch_gate = threading.BoundedSemaphore(self.max_in_flight_fetches)

    def crawl(self, url: str, depth: int = 0, indexer: Optional[Indexer] = None, stop_event=None) -> CrawlResult:
        """Crawl `url` at `depth` and everything it links to up to `depth_limit`."""
        indexer = indexer if indexer is not None else self.indexer
        if indexer is None:
            raise ValueError("indexer is required for crawl")

        state = self.state.new_run() if self.reset_per_run else self.state
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="crawl") as executor:
            run = _CrawlRun(state, indexer, stop_event, executor)
            self._submit(run, url, depth)
            run.tasks.wait()

        result = run.result()
        logger.info(
            "Crawl from %s finished: %s pages indexed, %s failed, %s URLs visited%s",
            url,
            result.pages_indexed,
            result.pages_failed,
            state.visited_count,
            " (stopped)" if result.stopped else "",
        )
        return result

    def _submit(self, run: _CrawlRun, url: str, depth: int) -> None:
        run.tasks.add()
        try:
            run.executor.submit(self._run_task, run, url, depth)
        except Exception:
            run.tasks.done()
            raise

    def _run_task(self, run: _CrawlRun, url: str, depth: int) -> None:
        try:
            self.crawl_page(run, url, depth)
        except Exception:
            logger.exception("Unexpected error while crawling %s", url)
        finally:
            run.tasks.done()

    def crawl_page(self, run: _CrawlRun, url: str, depth: int) -> None:
        if depth > self.depth_limit:
            logger.debug("Skipping (max depth reached) %s at depth %s", url, depth)
            return

        if run.is_stopped():
            logger.info("Crawl cancelled before %s", url)
            run.count(stopped=True)
            return

        outcome = run.state.claim(url)
        if outcome is ClaimOutcome.ALREADY_VISITED:
            logger.debug("Skipping (visited) %s", url)
            return
        if outcome is ClaimOutcome.BLOCKED:
            logger.debug("Skipping (blocked after %s failures) %s", run.state.max_failures, url)
            return

        visit_logger.info("Scraping URL: %s", url)
        logger.info("Crawling %s at depth %s", url, depth)

        try:
            with self._fetch_gate:
                self._require_allowed(url)
                page = self.page_fetcher.fetch(url, is_visited=run.state.is_visited)
        except RobotsDisallowedError as e:
            logger.info("%s", e)
            self._record_failure(run, url)
            return
        except HttpFetchError as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            self._record_failure(run, url)
            return
        except Exception as e:
            logger.error("Fetch error for %s: %s", url, e, exc_info=True)
            self._record_failure(run, url)
            return

        run.state.record_success(url)
        record = PageRecord.from_parsed(url, page, extract_keywords(page.content))
        try:
            run.indexer.index(record)
            run.count(indexed=1)
        except Exception as e:
            logger.error("Failed to index %s: %s", url, e)

        next_depth = depth + 1
        if next_depth > self.depth_limit:
            return
        for link in page.links:
            self._submit(run, link, next_depth)

    def _require_allowed(self, url: str) -> None:
        if not self.robots_policy.allowed(url):
            raise RobotsDisallowedError(url)

    def _record_failure(self, run: _CrawlRun, url: str) -> None:
        run.count(failed=1)
        count = run.state.record_failure(url)
        if count >= run.state.max_failures:
            logger.warning("Blocked %s due to too many failures (%s)", url, count)
