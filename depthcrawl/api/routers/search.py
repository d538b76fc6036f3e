import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from depthcrawl.exceptions import IndexingError
from depthcrawl.services.protocols import Indexer

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class SearchResult(BaseModel):
    title: str
    url: str
    highlightedContent: Optional[List[str]] = None


def _parse_date(name: str, value: Optional[str]) -> Optional[datetime]:
    if value is None or value.strip() == "":
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid '{name}' date: {value}")


def create_search_router(indexer: Indexer):
    router = APIRouter(tags=["Search"])

    @router.get("/")
    def welcome():
        return "Welcome! Please use the /search endpoint to search crawled pages."

    @router.get("/search", response_model=List[SearchResult], response_model_exclude_none=True)
    def search(
        keyword: Optional[str] = None,
        from_: int = Query(0, alias="from"),
        size: int = 0,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ):
        if not keyword:
            raise HTTPException(status_code=400, detail="Missing 'keyword' parameter")
        if from_ < 0 or size < 0:
            raise HTTPException(status_code=400, detail="'from' and 'size' must be non-negative")
        if size == 0:
            size = DEFAULT_PAGE_SIZE
        start_dt = _parse_date("start", start)
        end_dt = _parse_date("end", end)

        try:
            hits = indexer.search(keyword, offset=from_, limit=size, start=start_dt, end=end_dt)
        except IndexingError:
            logger.exception("Search failed for keyword %r", keyword)
            raise HTTPException(status_code=500, detail="Error executing search")

        return [
            SearchResult(title=h.title, url=h.url, highlightedContent=list(h.highlights) or None)
            for h in hits
        ]

    return router
