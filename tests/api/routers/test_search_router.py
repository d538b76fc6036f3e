from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from depthcrawl.api.routers.search import create_search_router
from depthcrawl.domain import SearchHit
from depthcrawl.exceptions import IndexingError


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def _client(indexer):
    app = FastAPI()
    app.include_router(create_search_router(indexer))
    return TestClient(app)


def test_missing_keyword_is_bad_request():
    indexer = Mock()
    endpoint = _get_endpoint(create_search_router(indexer), "/search", "GET")

    with pytest.raises(HTTPException) as exc:
        endpoint(keyword=None, from_=0, size=0, start=None, end=None)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Missing 'keyword' parameter"
    indexer.search.assert_not_called()


def test_zero_size_uses_default_page_size():
    indexer = Mock(search=Mock(return_value=[]))
    endpoint = _get_endpoint(create_search_router(indexer), "/search", "GET")
    endpoint(keyword="crawler", from_=5, size=0, start=None, end=None)
    indexer.search.assert_called_once_with("crawler", offset=5, limit=10, start=None, end=None)


def test_dates_are_parsed_as_iso_8601():
    indexer = Mock(search=Mock(return_value=[]))
    endpoint = _get_endpoint(create_search_router(indexer), "/search", "GET")
    endpoint(keyword="k", from_=0, size=3, start="2024-01-01T00:00:00Z", end="2024-02-01")
    kwargs = indexer.search.call_args.kwargs
    assert kwargs["start"] == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert kwargs["end"] == datetime(2024, 2, 1)


def test_invalid_date_is_bad_request():
    endpoint = _get_endpoint(create_search_router(Mock()), "/search", "GET")
    with pytest.raises(HTTPException) as exc:
        endpoint(keyword="k", from_=0, size=0, start="yesterday", end=None)
    assert exc.value.status_code == 400


def test_backend_failure_is_500_without_details():
    indexer = Mock(search=Mock(side_effect=IndexingError("es down", ConnectionError("refused"))))
    endpoint = _get_endpoint(create_search_router(indexer), "/search", "GET")
    with pytest.raises(HTTPException) as exc:
        endpoint(keyword="k", from_=0, size=0, start=None, end=None)
    assert exc.value.status_code == 500
    assert exc.value.detail == "Error executing search"


def test_search_over_http_uses_from_alias_and_omits_empty_highlights():
    hits = [
        SearchHit(title="One", url="https://a", highlights=["<em>k</em>"]),
        SearchHit(title="Two", url="https://b", highlights=[]),
    ]
    indexer = Mock(search=Mock(return_value=hits))
    resp = _client(indexer).get("/search", params={"keyword": "k", "from": 10, "size": 2})

    assert resp.status_code == 200
    assert resp.json() == [
        {"title": "One", "url": "https://a", "highlightedContent": ["<em>k</em>"]},
        {"title": "Two", "url": "https://b"},
    ]
    indexer.search.assert_called_once_with("k", offset=10, limit=2, start=None, end=None)


def test_negative_paging_over_http_is_400():
    resp = _client(Mock()).get("/search", params={"keyword": "k", "from": -1})
    assert resp.status_code == 400


def test_welcome_route():
    resp = _client(Mock()).get("/")
    assert resp.status_code == 200
    assert "/search" in resp.json()
