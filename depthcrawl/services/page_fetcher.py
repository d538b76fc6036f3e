from __future__ import annotations

from typing import Callable, Optional, Protocol

from depthcrawl.domain.parsed_page import ParsedPage
from depthcrawl.exceptions import HttpStatusError
from depthcrawl.services.http_service import HttpService
from depthcrawl.services.page_parser import PageParser


class Fetcher(Protocol):
    """Fetch a URL and return the parsed page.

    This is intentionally small so the crawl engine can be driven by fakes
    in tests or by a different transport later.
    """

    def fetch(self, url: str, is_visited: Optional[Callable[[str], bool]] = None) -> ParsedPage: ...


class PageFetcher:
    """One GET through `HttpService`, no retry; the body is handed to `PageParser`.

    Network failures and timeouts raise `HttpFetchError`; error statuses
    (>= 400) raise `HttpStatusError`.
    """

    def __init__(self, http_service: HttpService, parser: Optional[PageParser] = None):
        self.http_service = http_service
        self.parser = parser or PageParser()

    def fetch(self, url: str, is_visited: Optional[Callable[[str], bool]] = None) -> ParsedPage:
        response = self.http_service.fetch(url)
        if response.is_error:
            raise HttpStatusError(url, response.status_code)
        return self.parser.parse(url, response.text, is_visited=is_visited)
