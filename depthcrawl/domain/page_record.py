from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from depthcrawl.domain.parsed_page import ParsedPage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PageRecord:
    """Structured output of one successfully fetched page, handed to an indexer."""

    url: str
    title: str
    content: str
    description: str
    keywords: frozenset[str] = frozenset()
    fetched_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        # Callers may pass any iterable of keywords; keep the record hashable and immutable.
        if not isinstance(self.keywords, frozenset):
            object.__setattr__(self, "keywords", frozenset(self.keywords))

    @classmethod
    def from_parsed(cls, url: str, page: ParsedPage, keywords: Iterable[str]) -> "PageRecord":
        return cls(
            url=url,
            title=page.title,
            content=page.content,
            description=page.description,
            keywords=frozenset(keywords),
        )

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document sent to search backends."""
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "description": self.description,
            "keywords": sorted(self.keywords),
            "fetched_at": self.fetched_at.isoformat(),
        }
