"""Custom exceptions for depthcrawl services."""
from typing import Optional


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class HttpStatusError(HttpFetchError):
    """Raised when a page answers with an error status (>= 400)."""

    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(url, RuntimeError(f"HTTP status {status_code}"))


class RobotsDisallowedError(Exception):
    """Raised when the robots policy refuses a URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Disallowed by robots.txt: {url}")


class IndexingError(Exception):
    """Raised when an indexer cannot store or query page records."""

    def __init__(self, message: str, original: Optional[Exception] = None):
        self.original = original
        super().__init__(f"{message}: {original}" if original is not None else message)


class ConfigError(Exception):
    """Raised when a crawl job definition is missing or invalid."""

    def __init__(self, config_path: str, reason: str = "invalid"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")
