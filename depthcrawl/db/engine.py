from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from depthcrawl import config
from depthcrawl.db.models import Base

# One Engine per process; crawl threads share its connection pool.
_ENGINE: Optional[Engine] = None


def make_engine(database_url: Optional[str] = None) -> Engine:
    """Create or return the process-wide SQLAlchemy Engine.

    The first call decides the URL; later calls return the cached engine.
    SQLite connections are opened with `check_same_thread=False` because
    pages are indexed from crawl worker threads.
    """
    global _ENGINE
    if _ENGINE is not None:
        return _ENGINE
    database_url = database_url or config.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not set")
    connect_args = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    _ENGINE = create_engine(database_url, future=True, connect_args=connect_args)
    return _ENGINE


def init_schema(engine: Engine) -> None:
    """Create the page table if it does not exist yet."""
    Base.metadata.create_all(engine)
