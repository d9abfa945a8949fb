"""Tests for spam_auditor.scanner.results — rows, error rows, sorting, serialization."""
from datetime import datetime, timezone

from spam_auditor.scanner.directory import TenantMeta
from spam_auditor.scanner.results import (
    ScanReport,
    TenantResult,
    build_report,
    error_row,
    guess_home_url,
    sort_rows,
)


def _row(tenant_id, flagged, spam_count):
    return TenantResult(tenant_id=tenant_id, display_name=f'S{tenant_id}', home_url='',
                        spam_count=spam_count, flagged=flagged)


class TestSortRows:

    def test_flagged_first_then_spam_desc(self):
        rows = [_row(1, False, 5), _row(2, True, 3), _row(3, False, 9), _row(4, True, 3)]
        ordered = sort_rows(rows)
        assert [r.tenant_id for r in ordered] == [2, 4, 3, 1]

    def test_flagged_tie_break_by_spam(self):
        rows = [_row(1, True, 2), _row(2, True, 40), _row(3, True, 7)]
        assert [r.tenant_id for r in sort_rows(rows)] == [2, 3, 1]

    def test_stable_for_equal_keys(self):
        rows = [_row(i, False, 0) for i in range(6)]
        assert [r.tenant_id for r in sort_rows(rows)] == list(range(6))

    def test_does_not_mutate_input(self):
        rows = [_row(1, False, 1), _row(2, True, 1)]
        sort_rows(rows)
        assert [r.tenant_id for r in rows] == [1, 2]


class TestErrorRow:

    def test_placeholder_name_and_guessed_home(self):
        row = error_row(TenantMeta(id=7, domain='net.test', path='/blog/'), 'Skipped: boom')
        assert row.display_name == 'Site #7'
        assert row.home_url == 'https://net.test/blog/'
        assert row.error == 'Skipped: boom'

    def test_counts_zero_and_not_flagged(self):
        row = error_row(TenantMeta(id=7, domain='net.test', path='/'), 'Skipped: boom')
        assert (row.spam_count, row.pending_count, row.keyword_hits, row.link_heavy_hits) == (0, 0, 0, 0)
        assert row.spam_ratio == 0.0
        assert row.flagged is False

    def test_empty_message_still_marks_error(self):
        row = error_row(TenantMeta(id=1, domain='d', path='/'), '')
        assert row.error

    def test_guess_home_url_defaults(self):
        assert guess_home_url(None, None) == 'https://example.com/'
        assert guess_home_url('a.test', '/x/', scheme='http') == 'http://a.test/x/'


class TestScanReport:

    def test_to_dict_shape(self):
        report = ScanReport(
            scanned_at=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
            rows=[_row(1, True, 30)],
        )
        d = report.to_dict()
        assert d['scanned_at'] == '2026-03-01T12:00:00+00:00'
        assert set(d['rows'][0]) == {
            'tenant_id', 'display_name', 'home_url', 'spam_count', 'pending_count',
            'spam_ratio', 'keyword_hits', 'link_heavy_hits', 'flagged', 'error',
        }

    def test_from_dict_restores_report(self):
        report = ScanReport(
            scanned_at=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
            rows=[_row(1, True, 30), _row(2, False, 0)],
        )
        assert ScanReport.from_dict(report.to_dict()) == report

    def test_counters(self):
        rows = [_row(1, True, 30), _row(2, False, 0)]
        rows[1].error = 'Skipped: x'
        report = ScanReport(scanned_at=datetime.now(timezone.utc), rows=rows)
        assert report.flagged_count == 1
        assert report.error_count == 1

    def test_build_report_sorts_and_stamps(self):
        stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)
        report = build_report([_row(1, False, 1), _row(2, True, 0)], scanned_at=stamp)
        assert report.scanned_at == stamp
        assert [r.tenant_id for r in report.rows] == [2, 1]

    def test_build_report_defaults_to_now(self):
        report = build_report([])
        assert report.scanned_at.tzinfo is not None
        assert report.rows == []
