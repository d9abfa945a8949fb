"""
Report cache — the single "last results" slot in Redis.

put() overwrites the slot wholesale; there is no history. A run lock in the
same Redis keeps a cron run and a manual rescan from racing each other.
"""
import json
import logging
from typing import Optional

from spam_auditor.config import REPORT_CACHE_KEY, SCAN_LOCK_KEY, SCAN_LOCK_TIMEOUT
from spam_auditor.scanner.results import ScanReport

logger = logging.getLogger('services.report_cache')


class ReportCache:
    """
    Redis-backed single-slot cache.

    Keys:
        spam_audit:last_results  → JSON blob of the latest ScanReport
        spam_audit:scan_lock     → lock held while a scan runs
    """

    def __init__(self, redis_client, key: str = REPORT_CACHE_KEY):
        self.redis = redis_client
        self.key = key

    def get(self) -> Optional[ScanReport]:
        data = self.redis.get(self.key)
        if not data:
            return None
        try:
            return ScanReport.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError):
            logger.error("Cached report at %s is unreadable, ignoring it", self.key, exc_info=True)
            return None

    def put(self, report: ScanReport):
        self.redis.set(self.key, json.dumps(report.to_dict()))

    def clear(self):
        self.redis.delete(self.key)

    def scan_lock(self):
        """Run lock; expires on its own if a worker dies mid-scan."""
        return self.redis.lock(SCAN_LOCK_KEY, timeout=SCAN_LOCK_TIMEOUT)


def get_report_cache() -> ReportCache:
    from spam_auditor.extensions import redis_client
    return ReportCache(redis_client)
