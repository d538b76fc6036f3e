"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests
from sqlalchemy.orm import sessionmaker

from depthcrawl import config as env
from depthcrawl.db.engine import make_engine
from depthcrawl.repository.pages import PagesRepository
from depthcrawl.services.crawl_jobs import resolve_crawl_jobs
from depthcrawl.services.crawler import Crawler
from depthcrawl.services.elasticsearch_indexer import ElasticsearchIndexer
from depthcrawl.services.http_service import HttpService
from depthcrawl.services.page_fetcher import PageFetcher
from depthcrawl.services.page_parser import PageParser
from depthcrawl.services.robots_cache import RobotsCache
from depthcrawl.services.robots_policy import create_robots_policy
from depthcrawl.services.scheduler_service import SchedulerService


# Environment variables used by the container (read via `depthcrawl.config` helpers).
#
# USER_AGENT (str, default: "DepthCrawl/0.1")
#   User-Agent header for page fetches, and the agent matched against robots.txt groups.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Deadline for every outbound HTTP request; expiry counts as a fetch failure.
#
# DEPTH_LIMIT (int, default: 2)
#   Maximum number of link hops from a seed URL.
#
# DEPTHCRAWL_MAX_FAILURES (int, default: 5)
#   Failed attempts after which a URL is blocked (circuit breaker).
#
# DEPTHCRAWL_MAX_WORKERS (int, default: 16)
#   Worker threads per crawl run.
#
# DEPTHCRAWL_MAX_IN_FLIGHT_FETCHES (int, default: 8)
#   Concurrent fetches across all runs of the crawler.
#
# DEPTHCRAWL_RESET_PER_RUN (bool, default: false)
#   Start every run with an empty visited set. Failure counters are kept either way.
#
# DEPTHCRAWL_ROBOTS_POLICY (str, default: "rules")
#   "rules" evaluates robots.txt; "always_allow" skips it.
#
# DEPTHCRAWL_ROBOTS_CACHE_MAX_SIZE (int, default: 2048)
# DEPTHCRAWL_ROBOTS_CACHE_TTL_SECONDS (int seconds, default: 3600)
#   Bounds of the in-memory robots.txt cache.
#
# DEPTHCRAWL_INDEXER (str, default: "elasticsearch")
#   "elasticsearch" or "database".
#
# ELASTICSEARCH_URL (str, default: "http://127.0.0.1:9200")
# ELASTICSEARCH_INDEX (str, default: "webpages")
# ELASTICSEARCH_USERNAME / ELASTICSEARCH_PASSWORD (str | optional)
#
# DATABASE_URL (str | optional)
#   SQLAlchemy URL, required when DEPTHCRAWL_INDEXER=database.
#
# DEPTHCRAWL_SEED_URLS (comma-separated, default: empty)
# DEPTHCRAWL_JOBS_DIR (str, default: "configs")
# DEPTHCRAWL_CRAWL_INTERVAL_MINUTES (int, default: 30)
# DEPTHCRAWL_SCHEDULE_MAX_INSTANCES (int, default: 1)
#   Crawl jobs come from YAML files in DEPTHCRAWL_JOBS_DIR, or else one job over DEPTHCRAWL_SEED_URLS.
#
# DEPTHCRAWL_VISIT_LOG (str, default: "crawler.log")
# LOG_LEVEL (str, default: "INFO")
# DEPTHCRAWL_API_HOST / DEPTHCRAWL_API_PORT (default: "0.0.0.0" / 7000)
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", "DepthCrawl/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "DEPTH_LIMIT": env.get_int_env("DEPTH_LIMIT", 2),
    "DEPTHCRAWL_MAX_FAILURES": env.get_int_env("DEPTHCRAWL_MAX_FAILURES", 5),
    "DEPTHCRAWL_MAX_WORKERS": env.get_int_env("DEPTHCRAWL_MAX_WORKERS", 16),
    "DEPTHCRAWL_MAX_IN_FLIGHT_FETCHES": env.get_int_env("DEPTHCRAWL_MAX_IN_FLIGHT_FETCHES", 8),
    "DEPTHCRAWL_RESET_PER_RUN": env.get_bool_env("DEPTHCRAWL_RESET_PER_RUN", False),
    "DEPTHCRAWL_ROBOTS_POLICY": env.get_str_env("DEPTHCRAWL_ROBOTS_POLICY", "rules").strip().lower(),
    "DEPTHCRAWL_ROBOTS_CACHE_MAX_SIZE": env.get_int_env("DEPTHCRAWL_ROBOTS_CACHE_MAX_SIZE", 2048),
    "DEPTHCRAWL_ROBOTS_CACHE_TTL_SECONDS": env.get_int_env("DEPTHCRAWL_ROBOTS_CACHE_TTL_SECONDS", 3600),
    "DEPTHCRAWL_INDEXER": env.get_str_env("DEPTHCRAWL_INDEXER", "elasticsearch").strip().lower(),
    "ELASTICSEARCH_URL": env.get_str_env("ELASTICSEARCH_URL", "http://127.0.0.1:9200"),
    "ELASTICSEARCH_INDEX": env.get_str_env("ELASTICSEARCH_INDEX", "webpages"),
    "ELASTICSEARCH_USERNAME": env.get_optional_str_env("ELASTICSEARCH_USERNAME"),
    "ELASTICSEARCH_PASSWORD": env.get_optional_str_env("ELASTICSEARCH_PASSWORD"),
    "DATABASE_URL": env.get_optional_str_env("DATABASE_URL"),
    "DEPTHCRAWL_SEED_URLS": env.get_list_env("DEPTHCRAWL_SEED_URLS"),
    "DEPTHCRAWL_JOBS_DIR": env.get_str_env("DEPTHCRAWL_JOBS_DIR", "configs"),
    "DEPTHCRAWL_CRAWL_INTERVAL_MINUTES": env.get_int_env("DEPTHCRAWL_CRAWL_INTERVAL_MINUTES", 30),
    "DEPTHCRAWL_SCHEDULE_MAX_INSTANCES": env.get_int_env("DEPTHCRAWL_SCHEDULE_MAX_INSTANCES", 1),
    "DEPTHCRAWL_VISIT_LOG": env.get_str_env("DEPTHCRAWL_VISIT_LOG", "crawler.log"),
    "LOG_LEVEL": env.get_str_env("LOG_LEVEL", "INFO"),
    "DEPTHCRAWL_API_HOST": env.get_str_env("DEPTHCRAWL_API_HOST", "0.0.0.0"),
    "DEPTHCRAWL_API_PORT": env.get_int_env("DEPTHCRAWL_API_PORT", 7000),
}

# Secrets are reported as set/unset by the systems router.
SECRET_KEYS = frozenset({"ELASTICSEARCH_PASSWORD", "DATABASE_URL"})


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the depthcrawl application."""

    # Configuration
    config = providers.Configuration(default=ENV)

    # Database engine - Singleton to reuse connection pool
    db_engine = providers.Singleton(
        make_engine,
        database_url=config.DATABASE_URL,
    )
    # Session factory bound to the engine
    session_factory = providers.Factory(
        sessionmaker,
        bind=db_engine,
        future=True,
    )

    pages_repository = providers.Singleton(
        PagesRepository,
        session_factory=session_factory,
    )

    elasticsearch_indexer = providers.Singleton(
        ElasticsearchIndexer,
        base_url=config.ELASTICSEARCH_URL.as_(str),
        index_name=config.ELASTICSEARCH_INDEX.as_(str),
        username=config.ELASTICSEARCH_USERNAME,
        password=config.ELASTICSEARCH_PASSWORD,
        http_client=providers.Object(requests.request),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    # Only the selected backend is instantiated.
    indexer = providers.Selector(
        config.DEPTHCRAWL_INDEXER,
        elasticsearch=elasticsearch_indexer,
        database=pages_repository,
    )

    # Services - Singleton instances
    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    page_parser = providers.Singleton(PageParser)

    page_fetcher = providers.Singleton(
        PageFetcher,
        http_service=http_service,
        parser=page_parser,
    )

    robots_cache = providers.Singleton(
        RobotsCache,
        max_size=config.DEPTHCRAWL_ROBOTS_CACHE_MAX_SIZE.as_(int),
        ttl_seconds=config.DEPTHCRAWL_ROBOTS_CACHE_TTL_SECONDS.as_(int),
    )

    robots_policy = providers.Singleton(
        create_robots_policy,
        mode=config.DEPTHCRAWL_ROBOTS_POLICY.as_(str),
        http_service=http_service,
        user_agent=config.USER_AGENT.as_(str),
        cache=robots_cache,
    )

    # Long-lived: crawl state carries over between scheduled runs.
    crawler = providers.Singleton(
        Crawler,
        page_fetcher=page_fetcher,
        robots_policy=robots_policy,
        depth_limit=config.DEPTH_LIMIT.as_(int),
        max_failures=config.DEPTHCRAWL_MAX_FAILURES.as_(int),
        max_workers=config.DEPTHCRAWL_MAX_WORKERS.as_(int),
        max_in_flight_fetches=config.DEPTHCRAWL_MAX_IN_FLIGHT_FETCHES.as_(int),
        reset_per_run=config.DEPTHCRAWL_RESET_PER_RUN.as_(bool),
        indexer=indexer,
    )

    crawl_jobs = providers.Singleton(
        resolve_crawl_jobs,
        jobs_dir=config.DEPTHCRAWL_JOBS_DIR,
        seed_urls=config.DEPTHCRAWL_SEED_URLS,
        interval_minutes=config.DEPTHCRAWL_CRAWL_INTERVAL_MINUTES.as_(int),
    )

    scheduler_service = providers.Singleton(
        SchedulerService,
        crawler=crawler,
        indexer=indexer,
        jobs=crawl_jobs,
        max_instances=config.DEPTHCRAWL_SCHEDULE_MAX_INSTANCES.as_(int),
    )
