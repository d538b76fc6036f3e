import logging
import os
from typing import Optional

VISIT_LOGGER_NAME = "depthcrawl.visits"
VISIT_LOG_FORMAT = "%(asctime)s %(message)s"


def configure_logging(level: str = "INFO", visit_log_path: Optional[str] = None) -> Optional[logging.FileHandler]:
    """Configure root logging and the append-only visit log.

    The visit logger writes one line per URL the crawler is about to fetch.
    It does not propagate, so visits stay out of the application log.
    Returns the file handler attached to the visit logger, if any.
    """
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    visit_logger = logging.getLogger(VISIT_LOGGER_NAME)
    visit_logger.setLevel(logging.INFO)
    visit_logger.propagate = False
    if not visit_log_path:
        return None

    for handler in visit_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(visit_log_path):
            return handler

    handler = logging.FileHandler(visit_log_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(VISIT_LOG_FORMAT))
    visit_logger.addHandler(handler)
    return handler