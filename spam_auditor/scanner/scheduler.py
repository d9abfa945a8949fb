"""
Network scanner — batch scheduler that visits every active tenant.

Per tenant:
  GUARD_CHECK → ENTER_CONTEXT → AGGREGATE → HEURISTICS_GATE → SCORE → row

A corrupt tenant, a failed context switch or a failed query turns into an
error row for that tenant; nothing escapes the tenant boundary, so run()
always returns a ScanReport. Tenants are processed strictly in sequence and
tenant-scoped caches are dropped after every batch.
"""
import gc
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from spam_auditor import database
from spam_auditor.config import SITE_SCHEME
from spam_auditor.models.tenant_tables import cached_tenant_count, clear_tenant_table_cache
from spam_auditor.scanner import guard
from spam_auditor.scanner.context import acquire
from spam_auditor.scanner.directory import TenantDirectory
from spam_auditor.scanner.queries import (
    NO_HITS, build_keyword_pattern, count_comments, run_heuristics,
    should_run_heuristics,
)
from spam_auditor.scanner.results import (
    ScanReport, TenantResult, build_report, error_row,
)
from spam_auditor.scanner.scoring import score
from spam_auditor.scanner.settings import AuditSettings

logger = logging.getLogger('scanner.scheduler')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def lookback_boundary(now: datetime, lookback_days: int) -> datetime:
    """
    Naive UTC timestamp `lookback_days` before now (comment dates are stored naive UTC).

    A window reaching past the earliest representable date starts at datetime.min.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    try:
        return now - timedelta(days=lookback_days)
    except OverflowError:
        return datetime.min


def page_count(total: int, batch_size: int) -> int:
    """At least one page, even for an empty network."""
    return math.ceil(max(1, total) / max(1, batch_size))


def release_tenant_caches():
    """Drop process-local tenant-scoped state between batches."""
    logger.debug("Releasing table metadata for %d site(s)", cached_tenant_count())
    clear_tenant_table_cache()
    gc.collect()


def scan_tenant(tenant, settings: AuditSettings, since: datetime, keyword_pattern,
                session_factory: Callable) -> TenantResult:
    """Aggregate one tenant that already passed the guard."""
    with acquire(tenant, session_factory) as handle:
        home_url = handle.home_url()
        display_name = handle.display_name()

        counts = count_comments(handle, since)
        ratio = counts.spam_ratio

        hits = NO_HITS
        if should_run_heuristics(settings.light_mode, settings.heuristics_cutoff, counts.candidates):
            hits = run_heuristics(handle, since, keyword_pattern, settings.link_threshold)

        return TenantResult(
            tenant_id=tenant.id,
            display_name=display_name,
            home_url=home_url,
            spam_count=counts.spam,
            pending_count=counts.pending,
            spam_ratio=ratio,
            keyword_hits=hits.keyword_hits,
            link_heavy_hits=hits.link_heavy_hits,
            flagged=score(counts, ratio, hits, settings),
        )


def process_tenant(network_session, tenant, settings: AuditSettings, since: datetime,
                   keyword_pattern, session_factory: Callable) -> TenantResult:
    """Produce exactly one row for a tenant, whatever happens inside it."""
    try:
        verdict = guard.inspect(network_session, tenant.id)
        if not verdict.safe:
            logger.warning("Site #%d skipped: %s", tenant.id, verdict.reason,
                           extra={'tenant_id': tenant.id})
            return error_row(tenant, verdict.reason, SITE_SCHEME)

        return scan_tenant(tenant, settings, since, keyword_pattern, session_factory)
    except Exception as e:
        logger.warning("Site #%d failed: %s", tenant.id, e, extra={'tenant_id': tenant.id})
        return error_row(tenant, f'Skipped: {e}', SITE_SCHEME)


def run(settings: AuditSettings, session_factory: Optional[Callable] = None,
        now: Optional[datetime] = None) -> ScanReport:
    """
    Scan the whole network in batches of settings.batch_size.

    Args:
        settings:        Loaded by the caller; never read from global state here.
        session_factory: Returns a new DB session. Defaults to database.get_session.
        now:             Scan time; defaults to the current UTC time.
    """
    factory = session_factory or database.get_session
    now = now or utcnow()
    since = lookback_boundary(now, settings.lookback_days)
    keyword_pattern = build_keyword_pattern(settings.keywords)
    batch_size = max(1, settings.batch_size)

    rows: List[TenantResult] = []
    network_session = factory()
    try:
        directory = TenantDirectory(network_session)
        total = directory.count_active()
        pages = page_count(total, batch_size)
        logger.info("Scanning %d sites in %d batch(es) of %d", total, pages, batch_size)

        for page in range(pages):
            tenants = directory.page(page * batch_size, batch_size)
            for tenant in tenants:
                rows.append(process_tenant(
                    network_session, tenant, settings, since, keyword_pattern, factory))

            release_tenant_caches()
            logger.info("Batch %d/%d done: %d sites, %d rows so far",
                        page + 1, pages, len(tenants), len(rows))
    finally:
        network_session.close()

    report = build_report(rows, scanned_at=now)
    logger.info("Scan complete: %d sites, %d flagged, %d errors",
                len(report.rows), report.flagged_count, report.error_count)
    return report
