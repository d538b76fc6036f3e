from bs4 import BeautifulSoup

from depthcrawl.services.page_parser import PageParser

BASE = "https://example.com/dir/page.html"


def test_extracts_title_description_and_link():
    html = '<title>Hi</title><meta name="description" content="d"/><a href="/p">link</a>'
    page = PageParser().parse(BASE, html)
    assert page.title == "Hi"
    assert page.description == "d"
    assert page.links == ["https://example.com/p"]


def test_content_concatenates_all_text_including_script_and_style():
    html = "<html><head><style>p{color:red}</style></head><body><p>One</p><script>var x = 1;</script><p>Two</p></body></html>"
    page = PageParser().parse(BASE, html)
    assert page.content == "p{color:red}Onevar x = 1;Two"


def test_title_text_is_taken_verbatim_and_not_repeated_in_content():
    html = "<title>  Spaced Title </title><p>Body</p>"
    page = PageParser().parse(BASE, html)
    assert page.title == "  Spaced Title "
    assert page.content == "Body"


def test_only_first_title_is_honoured():
    html = "<title>First</title><svg><title>Second</title></svg>"
    page = PageParser().parse(BASE, html)
    assert page.title == "First"
    assert "Second" in page.content


def test_comments_and_doctype_are_not_text():
    html = "<!DOCTYPE html><!-- hidden --><p>shown</p>"
    page = PageParser().parse(BASE, html)
    assert page.content == "shown"


def test_meta_with_other_name_is_ignored():
    html = '<meta name="keywords" content="k"><meta name="description" content="real">'
    page = PageParser().parse(BASE, html)
    assert page.description == "real"


def test_links_are_resolved_deduplicated_and_filtered():
    html = (
        '<a href="a.html">1</a>'
        '<a href="/dir/a.html">2</a>'
        '<a href="mailto:someone@example.com">3</a>'
        '<a href="javascript:void(0)">4</a>'
        '<a href="http://[::1">5</a>'
        '<a name="anchor-without-href">6</a>'
        '<a href="https://other.org/x">7</a>'
    )
    page = PageParser().parse(BASE, html)
    assert page.links == ["https://example.com/dir/a.html", "https://other.org/x"]


def test_visited_hint_drops_known_links():
    html = '<a href="/seen">s</a><a href="/new">n</a>'
    visited = {"https://example.com/seen"}
    page = PageParser().parse(BASE, html, is_visited=visited.__contains__)
    assert page.links == ["https://example.com/new"]


def test_empty_body_yields_empty_page():
    page = PageParser().parse(BASE, "")
    assert page.links == []
    assert page.title == ""
    assert page.content == ""
    assert page.description == ""


def test_parse_error_keeps_what_was_collected():
    class BreaksHalfway:
        def __init__(self, html):
            self._soup = BeautifulSoup(html, "html.parser")

        @property
        def descendants(self):
            def walk():
                yield from self._soup.descendants
                raise RuntimeError("tokenizer broke")
            return walk()

    parser = PageParser(soup_factory=BreaksHalfway)
    page = parser.parse(BASE, '<title>T</title><a href="/a">x</a>')
    assert page.title == "T"
    assert page.links == ["https://example.com/a"]
    assert page.content == "x"


def test_soup_construction_failure_returns_empty_page():
    def boom(html):
        raise ValueError("cannot parse")

    page = PageParser(soup_factory=boom).parse(BASE, "<p>x</p>")
    assert page.links == []
    assert page.content == ""
