"""Crawl result data model."""
from typing import NamedTuple


class CrawlResult(NamedTuple):
    """Result of a crawl run.

    Provides feedback about what happened during the crawl,
    enabling callers to log metrics and distinguish success from cancellation.
    """
    pages_indexed: int
    """Number of pages successfully fetched and handed to the indexer"""

    pages_failed: int
    """Number of attempts that ended in a fetch or robots failure"""

    stopped: bool
    """True if crawl was stopped early via stop_event, False if completed normally"""
