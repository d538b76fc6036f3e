import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from depthcrawl.db.models import Page as DBPage
from depthcrawl.domain.page_record import PageRecord
from depthcrawl.domain.search_hit import SearchHit
from depthcrawl.exceptions import IndexingError

logger = logging.getLogger(__name__)

HIGHLIGHT_FRAGMENT_SIZE = 150


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PagesRepository:
    """Database-backed indexer: one row per page URL.

    Requires an explicit `session_factory` (callable returning a `Session`).
    Each call opens its own session, so the repository can be shared by
    crawl threads.
    """
    def __init__(self, session_factory):
        self.session_factory = session_factory

    @staticmethod
    def _sanitize_text(val: Optional[str]) -> Optional[str]:
        """Remove NUL (\x00) characters from text fields to satisfy DB constraints.

        Postgres TEXT columns cannot contain NULs; some fetched content (e.g., PDFs
        or binary responses misclassified as text) may include NUL bytes. Strip them
        before persisting.
        """
        if isinstance(val, str):
            return val.replace("\x00", "")
        return val

    def get_session(self) -> Session:
        return self.session_factory()

    def _to_domain(self, db_page: DBPage) -> PageRecord:
        return PageRecord(
            url=db_page.page_url,
            title=db_page.title or "",
            content=db_page.content or "",
            description=db_page.description or "",
            keywords=frozenset((db_page.keywords or "").split()),
            fetched_at=_as_utc(db_page.fetched_at) or datetime.now(timezone.utc),
        )

    def _apply(self, row: DBPage, record: PageRecord) -> None:
        row.title = self._sanitize_text(record.title)
        row.content = self._sanitize_text(record.content)
        row.description = self._sanitize_text(record.description)
        row.keywords = self._sanitize_text(" ".join(sorted(record.keywords)))
        row.fetched_at = _as_utc(record.fetched_at)

    def index(self, record: PageRecord) -> None:
        """Insert or update the row for `record.url`."""
        try:
            with self.get_session() as session:
                q = select(DBPage).where(DBPage.page_url == record.url)
                row = session.execute(q).scalars().first()
                if row is None:
                    row = DBPage(page_url=record.url)
                    session.add(row)
                self._apply(row, record)
                # Two crawl threads may insert the same URL; on a unique
                # constraint race, rollback and update the winner's row.
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    existing = session.execute(q).scalars().first()
                    if existing is None:
                        raise
                    self._apply(existing, record)
                    session.commit()
        except SQLAlchemyError as e:
            raise IndexingError(f"Could not store page {record.url}", e) from e

    def get_by_url(self, page_url: str) -> Optional[PageRecord]:
        with self.get_session() as session:
            q = select(DBPage).where(DBPage.page_url == page_url)
            row = session.execute(q).scalars().first()
            return self._to_domain(row) if row else None

    def count(self) -> int:
        with self.get_session() as session:
            return session.execute(select(func.count()).select_from(DBPage)).scalar_one()

    @staticmethod
    def _highlight(content: Optional[str], keyword: str) -> list[str]:
        if not content:
            return []
        idx = content.lower().find(keyword.lower())
        if idx < 0:
            return []
        start = max(0, idx - HIGHLIGHT_FRAGMENT_SIZE // 2)
        snippet = content[start:start + HIGHLIGHT_FRAGMENT_SIZE].strip()
        return [snippet] if snippet else []

    def search(
        self,
        keyword: str,
        offset: int = 0,
        limit: int = 10,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[SearchHit]:
        pattern = f"%{_escape_like(keyword)}%"
        q = select(DBPage).where(
            or_(
                DBPage.title.ilike(pattern, escape="\\"),
                DBPage.content.ilike(pattern, escape="\\"),
            )
        )
        if start is not None:
            q = q.where(DBPage.fetched_at >= _as_utc(start))
        if end is not None:
            q = q.where(DBPage.fetched_at <= _as_utc(end))
        q = q.order_by(DBPage.fetched_at.desc(), DBPage.page_id.desc()).offset(offset).limit(limit)
        try:
            with self.get_session() as session:
                rows = session.execute(q).scalars().all()
                return [
                    SearchHit(
                        title=row.title or "",
                        url=row.page_url,
                        highlights=self._highlight(row.content, keyword),
                    )
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise IndexingError(f"Search for {keyword!r} failed", e) from e

    def ping(self) -> bool:
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Database not reachable", exc_info=True)
            return False
