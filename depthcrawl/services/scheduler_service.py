import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from depthcrawl.domain.crawl_job import CrawlJob
from depthcrawl.services.protocols import Indexer

logger = logging.getLogger(__name__)


class SchedulerService:
    """Re-runs each crawl job's seeds on a fixed interval.

    Every run calls `crawler.crawl(seed, 0, indexer, stop_event)`; APScheduler
    runs jobs on its own worker threads, so a long crawl does not delay the
    scheduler. `max_instances` bounds how many runs of one job may overlap.
    """

    def __init__(self, crawler, indexer: Indexer, jobs: list[CrawlJob], max_instances: int = 1):
        self.crawler = crawler
        self.indexer = indexer
        self.jobs = list(jobs or [])
        self.max_instances = max(1, int(max_instances))
        self._stop_event = threading.Event()
        self._sched: Optional[BackgroundScheduler] = None

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def start(self):
        if self._sched is not None:
            return
        self._stop_event.clear()
        self._sched = BackgroundScheduler(timezone=timezone.utc)
        self._sched.start()
        logger.info("Scheduler started")
        self.schedule_all()

    def shutdown(self, wait: bool = True):
        if not self._sched:
            return
        # Ask in-flight crawls to stop before they issue further fetches.
        self._stop_event.set()
        try:
            self._sched.shutdown(wait=wait)
            logger.info("Scheduler shut down")
        finally:
            self._sched = None

    def schedule_all(self):
        """Register one interval job per crawl job, replacing earlier registrations."""
        if not self._sched:
            logger.warning("Scheduler not started; cannot schedule crawl jobs")
            return
        if not self.jobs:
            logger.warning("No crawl jobs configured; nothing to schedule")
            return
        for job in self.jobs:
            job_id = f"crawl:{job.name}"
            kwargs = {}
            if job.run_on_start:
                kwargs["next_run_time"] = datetime.now(timezone.utc)
            try:
                # Bind the job through args so each registration keeps its own CrawlJob.
                self._sched.add_job(
                    self.run_job,
                    trigger=IntervalTrigger(minutes=job.interval_minutes),
                    args=[job],
                    id=job_id,
                    replace_existing=True,
                    max_instances=self.max_instances,
                    **kwargs,
                )
                logger.info("Scheduled job %s every %s minutes", job_id, job.interval_minutes)
            except Exception:
                logger.exception("Could not schedule job %s", job_id)

    def run_job(self, job: CrawlJob):
        """Crawl every seed of `job` once; failures are logged, never raised."""
        for seed_url in job.seed_urls:
            if self._stop_event.is_set():
                logger.info("Job %s cancelled before seed %s", job.name, seed_url)
                return
            logger.info("Starting crawl from: %s at %s", seed_url, datetime.now(timezone.utc).isoformat())
            try:
                result = self.crawler.crawl(seed_url, 0, self.indexer, stop_event=self._stop_event)
                logger.info(
                    "Crawling completed for %s: %s pages indexed, %s failed",
                    seed_url,
                    result.pages_indexed,
                    result.pages_failed,
                )
            except Exception:
                logger.exception("Scheduled crawl failed for %s", seed_url)
