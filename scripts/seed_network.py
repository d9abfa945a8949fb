#!/usr/bin/env python3
"""
Seed a local network for trying the scanner.

Creates sites covering the cases the report has to show:
  1. Clean site
  2. Spam-heavy site (flagged on spam count + ratio)
  3. Keyword/link spam sitting in moderation (flagged on heuristics)
  4. Site whose user_roles is not a mapping (skipped by the guard)
  5. Site with no comments table (context switch fails)
  6. Archived site (never enumerated)

Usage:
    python scripts/seed_network.py          # seed all scenarios
    python scripts/seed_network.py --clear  # drop seeded sites first

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import sys
import os
import json
import argparse
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import insert, delete

from spam_auditor.database import get_session, engine, Base
from spam_auditor.models.site import Site
from spam_auditor.models.tenant_tables import create_tenant_tables, tenant_tables

SEED_DOMAIN = 'seed.example.test'

ROLES = {
    'administrator': {'name': 'Administrator', 'capabilities': {'moderate_comments': True}},
    'subscriber': {'name': 'Subscriber', 'capabilities': {'read': True}},
}


def _now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_site(session, path, name, roles=ROLES, archived=False, with_comments_table=True):
    site = Site(domain=SEED_DOMAIN, path=path, archived=archived)
    session.add(site)
    session.flush()

    tables = create_tenant_tables(session.connection(), site.id)
    if not with_comments_table:
        tables.comments.drop(session.connection())

    options = [
        {'option_name': 'blogname', 'option_value': name},
        {'option_name': 'home', 'option_value': f'https://{SEED_DOMAIN}{path}'},
    ]
    if roles is not None:
        options.append({
            'option_name': 'user_roles',
            'option_value': roles if isinstance(roles, str) else json.dumps(roles),
        })
    session.execute(insert(tables.options), options)
    return site


def add_comments(session, site, status, count, content='Nice post!', days_ago=1):
    comments = tenant_tables(site.id).comments
    when = _now() - timedelta(days=days_ago)
    session.execute(insert(comments), [
        {'post_id': 1, 'author': 'visitor', 'content': content, 'status': status, 'date_gmt': when}
        for _ in range(count)
    ])


def seed(session):
    clean = add_site(session, '/clean/', 'Clean Cooking Blog')
    add_comments(session, clean, 'approved', 40)
    add_comments(session, clean, 'spam', 2)

    spammy = add_site(session, '/spammy/', 'Abandoned Forum')
    add_comments(session, spammy, 'spam', 60, content='cheap replica watches http://a.test')
    add_comments(session, spammy, 'approved', 12)
    add_comments(session, spammy, 'spam', 500, days_ago=90)  # outside the window

    moderation = add_site(session, '/moderation/', 'Crypto Tips')
    add_comments(session, moderation, 'pending', 15,
                 content='Win money fast with BITCOIN http://x.test http://y.test')
    add_comments(session, moderation, 'approved', 80)

    add_site(session, '/corrupt/', 'Broken Roles', roles='"administrator"')
    add_site(session, '/no-comments/', 'Half Migrated', with_comments_table=False)
    add_site(session, '/archived/', 'Archived Site', archived=True)


def clear_seeded_data(session):
    seeded = session.query(Site).filter(Site.domain == SEED_DOMAIN).all()
    for site in seeded:
        tenant_tables(site.id).metadata.drop_all(session.connection())
    session.execute(delete(Site).where(Site.domain == SEED_DOMAIN))
    print(f'Cleared {len(seeded)} seeded sites.')


def main():
    parser = argparse.ArgumentParser(description='Seed a local network for the spam audit')
    parser.add_argument('--clear', action='store_true', help='Clear seeded sites before seeding')
    parser.add_argument('--clear-only', action='store_true', help='Only clear, do not re-seed')
    args = parser.parse_args()

    # Ensure tables exist (for SQLite local dev)
    import spam_auditor.models.audit_settings  # noqa: F401
    Base.metadata.create_all(engine)

    session = get_session()
    try:
        if args.clear or args.clear_only:
            clear_seeded_data(session)
            if args.clear_only:
                session.commit()
                return

        print('Seeding network...')
        seed(session)
        session.commit()
        print('\nDone! Run `spam-audit scan` to see the report.')

    except Exception as e:
        session.rollback()
        print(f'Error: {e}')
        raise
    finally:
        session.close()


if __name__ == '__main__':
    main()
