from typing import Callable

import requests

from depthcrawl.domain.http_response import HttpResponse
from depthcrawl.exceptions import HttpFetchError

PAGE_ACCEPT = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"
ROBOTS_ACCEPT = "text/plain,*/*;q=0.5"


def _needs_sniffed_charset(content_type: str) -> bool:
    """Text responses without a declared charset; requests would decode them as ISO-8859-1."""
    media_type = content_type.lower()
    if "charset" in media_type:
        return False
    return media_type.startswith("text/") or "html" in media_type


class HttpService:
    """
    Thin wrapper over a `requests.get`-style callable used for pages and robots.txt.

    `timeout` is the deadline of every request. Transport errors, timeouts and
    redirect loops surface as `HttpFetchError`; HTTP error statuses are
    returned, callers decide what they mean.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def _get(self, url: str, accept: str) -> HttpResponse:
        headers = {"User-Agent": self.user_agent, "Accept": accept}
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        content_type = None
        if hasattr(resp, "headers"):
            content_type = resp.headers.get("Content-Type")
            if isinstance(content_type, str) and _needs_sniffed_charset(content_type) and hasattr(resp, "apparent_encoding"):
                resp.encoding = resp.apparent_encoding

        return HttpResponse(resp.status_code, resp.text, content_type)

    def fetch(self, url: str) -> HttpResponse:
        """GET a page and return status, decoded body and Content-Type."""
        return self._get(url, PAGE_ACCEPT)

    def fetch_robots(self, robots_url: str) -> HttpResponse:
        return self._get(robots_url, ROBOTS_ACCEPT)
