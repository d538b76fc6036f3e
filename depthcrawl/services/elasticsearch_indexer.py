import hashlib
import logging
from datetime import datetime
from typing import Any, Callable, Optional

import requests

from depthcrawl.domain.page_record import PageRecord
from depthcrawl.domain.search_hit import SearchHit
from depthcrawl.exceptions import IndexingError

logger = logging.getLogger(__name__)

HIGHLIGHT_FRAGMENT_SIZE = 150
HIGHLIGHT_FRAGMENTS = 3


class ElasticsearchIndexer:
    """
    Stores page records in an Elasticsearch index through its REST API.

    Documents are keyed by a hash of the page URL, so re-crawling a page
    replaces its previous document. `http_client` has the signature of
    `requests.request`; the underlying connection pool is thread-safe.
    """

    def __init__(
        self,
        base_url: str,
        index_name: str = "webpages",
        username: Optional[str] = None,
        password: Optional[str] = None,
        http_client: Callable = requests.request,
        timeout: int = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.index_name = index_name
        self.auth = (username, password or "") if username else None
        self.http_client = http_client
        self.timeout = timeout

    @staticmethod
    def document_id(url: str) -> str:
        return hashlib.sha256(url.encode("utf-8")).hexdigest()

    def _request(self, method: str, path: str, body: Optional[dict] = None):
        url = f"{self.base_url}{path}"
        try:
            resp = self.http_client(method, url, json=body, auth=self.auth, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise IndexingError(f"Elasticsearch {method} {path} failed", e) from e
        if resp.status_code >= 300:
            raise IndexingError(f"Elasticsearch returned error status {resp.status_code} for {method} {path}")
        return resp

    def index(self, record: PageRecord) -> None:
        path = f"/{self.index_name}/_doc/{self.document_id(record.url)}"
        self._request("PUT", path, record.to_document())
        logger.debug("Indexed %s into %s", record.url, self.index_name)

    def build_query(
        self,
        keyword: str,
        offset: int = 0,
        limit: int = 10,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> dict[str, Any]:
        must: list[dict[str, Any]] = [
            {
                "multi_match": {
                    "query": keyword,
                    "fields": ["title^3", "content^2"],
                    "fuzziness": "AUTO",
                }
            }
        ]
        if start is not None or end is not None:
            date_range: dict[str, Any] = {"format": "strict_date_optional_time||epoch_millis"}
            if start is not None:
                date_range["gte"] = start.isoformat()
            if end is not None:
                date_range["lte"] = end.isoformat()
            must.append({"range": {"fetched_at": date_range}})
        return {
            "from": offset,
            "size": limit,
            "query": {"bool": {"must": must}},
            "highlight": {
                "fields": {
                    "content": {
                        "fragment_size": HIGHLIGHT_FRAGMENT_SIZE,
                        "number_of_fragments": HIGHLIGHT_FRAGMENTS,
                    }
                }
            },
        }

    def search(
        self,
        keyword: str,
        offset: int = 0,
        limit: int = 10,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[SearchHit]:
        query = self.build_query(keyword, offset, limit, start, end)
        resp = self._request("POST", f"/{self.index_name}/_search", query)
        try:
            payload = resp.json()
        except ValueError as e:
            raise IndexingError("Elasticsearch returned an undecodable search response", e) from e

        hits = []
        for hit in payload.get("hits", {}).get("hits", []):
            source = hit.get("_source", {})
            highlight = hit.get("highlight", {}) or {}
            hits.append(
                SearchHit(
                    title=source.get("title", ""),
                    url=source.get("url", ""),
                    highlights=list(highlight.get("content", [])),
                )
            )
        return hits

    def ping(self) -> bool:
        try:
            self._request("GET", "/")
        except IndexingError:
            logger.warning("Elasticsearch not reachable at %s", self.base_url, exc_info=True)
            return False
        return True
