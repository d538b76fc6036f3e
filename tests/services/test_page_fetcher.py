from unittest.mock import Mock

import pytest

from depthcrawl.domain.http_response import HttpResponse
from depthcrawl.exceptions import HttpFetchError, HttpStatusError
from depthcrawl.services.page_fetcher import PageFetcher


def test_fetch_parses_body_against_requested_url():
    http = Mock()
    http.fetch.return_value = HttpResponse(200, '<title>Hi</title><a href="/p">link</a>', "text/html")
    page = PageFetcher(http).fetch("https://example.com/start")
    http.fetch.assert_called_once_with("https://example.com/start")
    assert page.title == "Hi"
    assert page.links == ["https://example.com/p"]


def test_fetch_passes_visited_hint_to_parser():
    http = Mock()
    http.fetch.return_value = HttpResponse(200, "<html></html>")
    parser = Mock()
    hint = Mock(return_value=False)
    PageFetcher(http, parser).fetch("https://example.com", is_visited=hint)
    parser.parse.assert_called_once_with("https://example.com", "<html></html>", is_visited=hint)


@pytest.mark.parametrize("status", [400, 404, 500, 503])
def test_error_status_raises(status):
    http = Mock()
    http.fetch.return_value = HttpResponse(status, "nope")
    with pytest.raises(HttpStatusError) as exc:
        PageFetcher(http).fetch("https://example.com/missing")
    assert exc.value.status_code == status
    assert isinstance(exc.value, HttpFetchError)


def test_network_error_propagates():
    http = Mock()
    http.fetch.side_effect = HttpFetchError("https://example.com", OSError("refused"))
    with pytest.raises(HttpFetchError):
        PageFetcher(http).fetch("https://example.com")


def test_redirect_status_is_parsed():
    http = Mock()
    http.fetch.return_value = HttpResponse(304, "<p>cached</p>")
    page = PageFetcher(http).fetch("https://example.com")
    assert page.content == "cached"
