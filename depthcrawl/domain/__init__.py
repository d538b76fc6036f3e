"""Domain objects for depthcrawl - explicit re-exports to satisfy linters."""
from .page_record import PageRecord as PageRecord
from .parsed_page import ParsedPage as ParsedPage
from .crawl_state import CrawlState as CrawlState, ClaimOutcome as ClaimOutcome
from .crawl_result import CrawlResult as CrawlResult
from .crawl_job import CrawlJob as CrawlJob
from .search_hit import SearchHit as SearchHit

__all__ = ["PageRecord", "ParsedPage", "CrawlState", "ClaimOutcome", "CrawlResult", "CrawlJob", "SearchHit"]
