from dataclasses import dataclass, field


@dataclass(frozen=True)
class CrawlJob:
    """A named set of seed URLs re-crawled on a fixed interval."""

    name: str
    seed_urls: list[str] = field(default_factory=list)
    interval_minutes: int = 30
    run_on_start: bool = True
