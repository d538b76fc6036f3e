from typing import NamedTuple


class SearchHit(NamedTuple):
    """One search result returned by an indexer."""
    title: str
    url: str
    highlights: list[str]
