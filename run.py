import logging

import uvicorn

from depthcrawl.api.server import create_app
from depthcrawl.container import Container, SECRET_KEYS
from depthcrawl.db.engine import init_schema
from depthcrawl.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def main(container: Container = None):
    """Start the crawl scheduler and serve the search API until interrupted.

    Accepts an injected container so tests can replace collaborators.
    """
    container = container or Container()
    cfg = container.config

    configure_logging(cfg.LOG_LEVEL(), cfg.DEPTHCRAWL_VISIT_LOG())

    if cfg.DEPTHCRAWL_INDEXER() == "database":
        init_schema(container.db_engine())

    indexer = container.indexer()
    if not indexer.ping():
        raise RuntimeError(f"Indexer ({cfg.DEPTHCRAWL_INDEXER()}) is not reachable")

    scheduler = container.scheduler_service()
    scheduler.start()

    app = create_app(indexer, cfg(), SECRET_KEYS)
    host = cfg.DEPTHCRAWL_API_HOST()
    port = int(cfg.DEPTHCRAWL_API_PORT())
    logger.info("Search API listening on %s:%s", host, port)
    try:
        uvicorn.run(app, host=host, port=port)
    finally:
        scheduler.shutdown(wait=False)


if __name__ == '__main__':
    main()
