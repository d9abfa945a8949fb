"""
Command-line entrypoint.

Usage:
    spam-audit scan                  # scan now, print a table
    spam-audit scan --format json    # scan now, print the report as JSON
    spam-audit schedule on|off       # start/stop the daily scan

A scan exits 0 once it completes, however many sites errored; per-site
errors are part of the report.
"""
import argparse
import json
import sys

from spam_auditor.errors import ScanInProgressError
from spam_auditor.logging_config import configure_logging

TABLE_COLUMNS = [
    'site_id', 'site_name', 'home', 'spam', 'pending', 'spam_ratio',
    'kw_hits', 'link_heavy', 'flagged', 'error',
]


def table_items(report):
    """One flat dict per row, in the CLI's column vocabulary."""
    return [
        {
            'site_id': row.tenant_id,
            'site_name': row.display_name,
            'home': row.home_url,
            'spam': row.spam_count,
            'pending': row.pending_count,
            'spam_ratio': f'{round(row.spam_ratio * 100, 1)}%',
            'kw_hits': row.keyword_hits,
            'link_heavy': row.link_heavy_hits,
            'flagged': 'yes' if row.flagged else 'no',
            'error': row.error,
        }
        for row in report.rows
    ]


def format_table(items, columns=TABLE_COLUMNS) -> str:
    cells = [[str(item[c]) for c in columns] for item in items]
    widths = [max([len(c)] + [len(r[i]) for r in cells]) for i, c in enumerate(columns)]

    def line(values):
        return '| ' + ' | '.join(v.ljust(w) for v, w in zip(values, widths)) + ' |'

    border = '+' + '+'.join('-' * (w + 2) for w in widths) + '+'
    out = [border, line(columns), border]
    out.extend(line(r) for r in cells)
    out.append(border)
    return '\n'.join(out)


def render(report, fmt: str) -> str:
    if fmt == 'json':
        return json.dumps(report.to_dict(), indent=2)
    return format_table(table_items(report))


def cmd_scan(args) -> int:
    from spam_auditor.services.audit import run_scan_and_store

    try:
        report = run_scan_and_store()
    except ScanInProgressError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    print(render(report, args.format))
    if args.format != 'json':
        print('Success: Scan complete.')
    return 0


def cmd_schedule(args) -> int:
    from spam_auditor.services.audit import activate_schedule, deactivate_schedule

    if args.state == 'on':
        job = activate_schedule()
        print('Daily scan scheduled.' if job else 'Daily scan already scheduled.')
    else:
        deactivate_schedule()
        print('Daily scan schedule cleared.')
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog='spam-audit', description='Network comment spam audit')
    sub = parser.add_subparsers(dest='command', required=True)

    scan = sub.add_parser('scan', help='Scan every active site and store the report')
    scan.add_argument('--format', choices=['table', 'json'], default='table')
    scan.set_defaults(func=cmd_scan)

    schedule = sub.add_parser('schedule', help='Turn the daily scan on or off')
    schedule.add_argument('state', choices=['on', 'off'])
    schedule.set_defaults(func=cmd_schedule)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
