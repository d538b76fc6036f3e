import logging
from typing import Optional, Protocol
from urllib.parse import urljoin, urlparse

from depthcrawl.services.robots_cache import RobotsCache
from depthcrawl.services.robots_fetcher import RobotsFetcher

logger = logging.getLogger(__name__)

ALWAYS_ALLOW = "always_allow"
RULE_BASED = "rules"


class RobotsPolicy(Protocol):
    """Answers whether a URL may be fetched."""

    def allowed(self, url: str) -> bool: ...


class AlwaysAllowPolicy:
    """Permits every URL. Used when robots handling is switched off and in tests."""

    def allowed(self, url: str) -> bool:
        return True


class RuleBasedRobotsPolicy:
    """
    Evaluates robots.txt `User-agent`/`Allow`/`Disallow` groups for `user_agent`.

    Orchestrates fetching, caching, and permission checking for robots.txt files.
    Fails open: unreachable endpoints, non-200 answers, malformed bodies and
    evaluation errors all allow the fetch.
    """

    def __init__(self, http_service, user_agent: str,
                 robots_fetcher: Optional[RobotsFetcher] = None,
                 cache: Optional[RobotsCache] = None):
        self.http_service = http_service
        self.user_agent = user_agent
        self.robots_fetcher = robots_fetcher if robots_fetcher is not None else RobotsFetcher(http_service)
        self.cache = cache if cache is not None else RobotsCache()

    def allowed(self, url: str) -> bool:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            # Fail open: invalid/relative URLs should not block crawling.
            return True

        base = f"{parsed.scheme}://{parsed.netloc}"
        cached = self.cache.lookup(base)
        if cached.hit:
            robots_parser = cached.parser
        else:
            robots_url = urljoin(base, "/robots.txt")
            robots_parser = self.robots_fetcher.fetch(robots_url)
            self.cache.set(base, robots_parser)

        if robots_parser is None:
            return True

        try:
            return robots_parser.can_fetch(self.user_agent, url)
        except Exception:
            logger.exception("Error checking robots permission for %s", url)
            return True


def create_robots_policy(mode: str, http_service=None, user_agent: str = "", cache: Optional[RobotsCache] = None) -> RobotsPolicy:
    """Build the robots policy named by `mode` (`rules` or `always_allow`)."""
    normalized = (mode or RULE_BASED).strip().lower()
    if normalized == ALWAYS_ALLOW:
        return AlwaysAllowPolicy()
    if normalized == RULE_BASED:
        if http_service is None:
            raise ValueError("http_service is required for rule-based robots policy")
        return RuleBasedRobotsPolicy(http_service, user_agent, cache=cache)
    raise ValueError(f"Unknown robots policy: {mode!r}")
