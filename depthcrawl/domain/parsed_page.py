from typing import NamedTuple


class ParsedPage(NamedTuple):
    """What a single fetched page yields: outbound links plus extracted text fields."""
    links: list[str]
    title: str
    content: str
    description: str
