"""Protocol (interface) definitions for services."""

from datetime import datetime
from typing import Optional, Protocol

from depthcrawl.domain.page_record import PageRecord
from depthcrawl.domain.search_hit import SearchHit


class Indexer(Protocol):
    """Sink for page records plus the query side used by the search API.

    Implementations must be safe to call from many crawl threads at once and
    raise `IndexingError` on failure.
    """

    def index(self, record: PageRecord) -> None:
        """Store one page record."""
        ...

    def search(
        self,
        keyword: str,
        offset: int = 0,
        limit: int = 10,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[SearchHit]:
        """Return records matching `keyword`, paginated and optionally bounded by fetch date."""
        ...

    def ping(self) -> bool:
        """Return True if the backend is reachable."""
        ...
