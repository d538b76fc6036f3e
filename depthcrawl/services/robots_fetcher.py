import logging
from typing import Optional
from urllib.robotparser import RobotFileParser

from depthcrawl.exceptions import HttpFetchError

logger = logging.getLogger(__name__)


class RobotsFetcher:
    """Fetch robots.txt content and return a parsed RobotFileParser or None.

    Uses an `http_service` with a `fetch_robots(url)` method that returns
    an HttpResponse. `None` means there is nothing to enforce: the endpoint
    was unreachable, answered non-200, was empty or could not be parsed.
    """
    def __init__(self, http_service):
        self.http_service = http_service

    def fetch(self, robots_url: str) -> Optional[RobotFileParser]:
        try:
            response = self.http_service.fetch_robots(robots_url)
        except HttpFetchError:
            logger.warning("Network error fetching robots.txt from %s", robots_url, exc_info=True)
            return None

        if response.status_code != 200 or not response.text:
            logger.debug("No robots rules at %s (status %s)", robots_url, response.status_code)
            return None

        try:
            robots_parser = RobotFileParser(robots_url)
            robots_parser.parse(response.text.splitlines())
            return robots_parser
        except Exception:
            logger.exception("Error parsing robots.txt from %s", robots_url)
            return None
