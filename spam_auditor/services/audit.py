"""
Audit service — the one entrypoint behind every trigger.

The daily job, the manual rescan (HTTP) and the CLI all call
run_scan_and_store(), so they produce the same ScanReport shape:
  1. take the run lock (a concurrent trigger gets ScanInProgressError)
  2. load settings once
  3. scan the network
  4. overwrite the cached report

The daily schedule is an RQ job that re-enqueues itself every
SCAN_INTERVAL_HOURS. The worker must run with `rq worker --with-scheduler`.
"""
import logging
from datetime import timedelta
from typing import Callable, Optional

from redis.exceptions import LockError

from spam_auditor.config import (
    DAILY_JOB_KEY, SCAN_FIRST_DELAY_SECONDS, SCAN_INTERVAL_HOURS, SCAN_JOB_TIMEOUT,
)
from spam_auditor.errors import ScanInProgressError
from spam_auditor.scanner import scheduler
from spam_auditor.scanner.results import ScanReport
from spam_auditor.services.report_cache import ReportCache, get_report_cache
from spam_auditor.services.settings_store import load_settings

logger = logging.getLogger('services.audit')

_ACTIVE_JOB_STATUSES = ('scheduled', 'queued', 'started', 'deferred')


# ── Lazy RQ queue (avoids import-time Redis connection in the CLI) ───────────

_queue = None


def _get_queue():
    global _queue
    if _queue is None:
        from spam_auditor.extensions import rq_connection
        from rq import Queue
        _queue = Queue(connection=rq_connection)
    return _queue


def _redis():
    from spam_auditor.extensions import redis_client
    return redis_client


# ── Scan entrypoint ───────────────────────────────────────────────────────────

def run_scan_and_store(cache: Optional[ReportCache] = None,
                       session_factory: Optional[Callable] = None) -> ScanReport:
    """Run a full network scan and replace the cached report with its result."""
    cache = cache or get_report_cache()

    lock = cache.scan_lock()
    if not lock.acquire(blocking=False):
        raise ScanInProgressError()

    try:
        settings = load_settings()
        report = scheduler.run(settings, session_factory=session_factory)
        cache.put(report)
        return report
    finally:
        try:
            lock.release()
        except LockError:
            logger.warning("Scan lock expired before the scan finished")


def run_scan_job() -> dict:
    """RQ job body for an on-demand scan."""
    return run_scan_and_store().to_dict()


def enqueue_scan():
    """Queue a scan on the RQ worker and return the job."""
    job = _get_queue().enqueue(run_scan_job, job_timeout=SCAN_JOB_TIMEOUT)
    logger.info("Enqueued on-demand scan job %s", job.id)
    return job


# ── Daily schedule ────────────────────────────────────────────────────────────

def _schedule_in(delay: timedelta):
    job = _get_queue().enqueue_in(delay, run_daily_scan, job_timeout=SCAN_JOB_TIMEOUT)
    _redis().set(DAILY_JOB_KEY, job.id)
    logger.info("Next scheduled scan %s in %s", job.id, delay)
    return job


def is_scheduled() -> bool:
    job_id = _redis().get(DAILY_JOB_KEY)
    if not job_id:
        return False
    job = _get_queue().fetch_job(job_id)
    return job is not None and job.get_status() in _ACTIVE_JOB_STATUSES


def activate_schedule():
    """Start the daily scan (first run shortly after activation). Idempotent."""
    if is_scheduled():
        return None
    return _schedule_in(timedelta(seconds=SCAN_FIRST_DELAY_SECONDS))


def deactivate_schedule():
    """Stop the daily scan; a scan already running finishes but is not rescheduled."""
    r = _redis()
    job_id = r.get(DAILY_JOB_KEY)
    r.delete(DAILY_JOB_KEY)
    if not job_id:
        return
    job = _get_queue().fetch_job(job_id)
    if job is not None and job.get_status() != 'started':
        job.delete()
    logger.info("Daily scan schedule cleared")


def run_daily_scan():
    """RQ job body for the daily scan; schedules its own successor."""
    try:
        run_scan_and_store()
    except ScanInProgressError:
        logger.warning("Daily scan skipped: another scan is running")
    finally:
        if _redis().get(DAILY_JOB_KEY):
            _schedule_in(timedelta(hours=SCAN_INTERVAL_HOURS))
