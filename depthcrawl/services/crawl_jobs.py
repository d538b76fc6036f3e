import logging
import os
from typing import Optional

import yaml

from depthcrawl.domain.crawl_job import CrawlJob
from depthcrawl.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MINUTES = 30


def parse_crawl_job(data, config_path: str) -> CrawlJob:
    """Build a `CrawlJob` from one YAML document.

    Each document must contain:
      - name: string
      - seed_urls: string or list of strings
    and may contain:
      - interval_minutes: positive integer (default 30)
      - run_on_start: boolean (default true)
    """
    if not isinstance(data, dict):
        raise ConfigError(config_path, "is empty or not a mapping")
    name = data.get("name")
    if not name:
        raise ConfigError(config_path, "is missing 'name'")
    seed_urls = data.get("seed_urls")
    if isinstance(seed_urls, str):
        seed_urls = [seed_urls]
    if not seed_urls or not all(isinstance(u, str) and u.strip() for u in seed_urls):
        raise ConfigError(config_path, "needs at least one seed URL in 'seed_urls'")
    try:
        interval = int(data.get("interval_minutes", DEFAULT_INTERVAL_MINUTES))
    except (TypeError, ValueError):
        raise ConfigError(config_path, "has a non-integer 'interval_minutes'")
    if interval <= 0:
        raise ConfigError(config_path, "needs a positive 'interval_minutes'")
    return CrawlJob(
        name=str(name),
        seed_urls=[u.strip() for u in seed_urls],
        interval_minutes=interval,
        run_on_start=bool(data.get("run_on_start", True)),
    )


def load_crawl_jobs(path: Optional[str] = None) -> list[CrawlJob]:
    """Load YAML crawl job files from `path` (default ./configs). Invalid files are logged and skipped."""
    base = path or os.path.join(os.getcwd(), "configs")
    jobs: list[CrawlJob] = []
    if not os.path.isdir(base):
        return jobs

    for fname in sorted(os.listdir(base)):
        if not (fname.endswith(".yml") or fname.endswith(".yaml")):
            continue
        full = os.path.join(base, fname)
        try:
            with open(full, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
            jobs.append(parse_crawl_job(data, fname))
        except (OSError, yaml.YAMLError, ConfigError):
            logger.exception("Could not load crawl job %s", full)
    return jobs


def default_crawl_jobs(seed_urls: list[str], interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> list[CrawlJob]:
    if not seed_urls:
        return []
    return [CrawlJob(name="default", seed_urls=list(seed_urls), interval_minutes=interval_minutes)]


def resolve_crawl_jobs(jobs_dir: Optional[str], seed_urls: list[str], interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> list[CrawlJob]:
    """Jobs from `jobs_dir` if it defines any, else one job built from `seed_urls`."""
    jobs = load_crawl_jobs(jobs_dir)
    if jobs:
        return jobs
    return default_crawl_jobs(seed_urls, interval_minutes)
