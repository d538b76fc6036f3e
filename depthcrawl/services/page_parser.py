import logging
from typing import Callable, Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from depthcrawl.domain.parsed_page import ParsedPage
from depthcrawl.services.url_resolver import resolve_url

logger = logging.getLogger(__name__)

# NavigableString subclasses that are markup, not document text.
_NON_TEXT_NODES = (Comment, Declaration, Doctype, ProcessingInstruction, CData)
_FOLLOWABLE_SCHEMES = ("http", "https")


def _is_text(node) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, _NON_TEXT_NODES)


class PageParser:
    """Single forward pass over a page that collects links, title, description and text.

    Nodes are visited once in document order. Text is concatenated unfiltered,
    script and style bodies included. Only the first `<title>` is honoured and
    its leading text node is taken verbatim. A failure part-way through the
    walk keeps whatever was gathered up to that point.
    """

    def __init__(self, soup_factory: Optional[Callable[[str], BeautifulSoup]] = None):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def parse(self, base_url: str, html: Optional[str], is_visited: Optional[Callable[[str], bool]] = None) -> ParsedPage:
        links: dict[str, None] = {}
        title: Optional[str] = None
        description = ""
        chunks: list[str] = []
        consumed = None

        if not html:
            return ParsedPage([], "", "", "")

        try:
            soup = self._soup_factory(html)
            for node in soup.descendants:
                if isinstance(node, Tag):
                    if node.name == "a":
                        link = self._link_from_anchor(base_url, node, is_visited)
                        if link:
                            links.setdefault(link, None)
                    elif node.name == "title" and title is None:
                        first = node.contents[0] if node.contents else None
                        if _is_text(first):
                            title = str(first)
                            consumed = first
                        else:
                            title = ""
                    elif node.name == "meta" and node.get("name") == "description":
                        description = node.get("content", "") or ""
                elif _is_text(node) and node is not consumed:
                    chunks.append(str(node))
        except Exception:
            logger.warning("Parse error for %s; keeping partial page", base_url, exc_info=True)

        return ParsedPage(list(links), title or "", "".join(chunks), description)

    def _link_from_anchor(self, base_url: str, anchor: Tag, is_visited: Optional[Callable[[str], bool]]) -> str:
        href = anchor.get("href")
        if href is None:
            return ""
        link = resolve_url(base_url, href)
        if not link:
            return ""
        if urlsplit(link).scheme.lower() not in _FOLLOWABLE_SCHEMES:
            return ""
        # Advisory only: the crawl engine re-checks visited state when it claims the URL.
        if is_visited is not None and is_visited(link):
            return ""
        return link
