"""
Per-tenant tables — every site owns `site_<id>_options` and `site_<id>_comments`.

These are SQLAlchemy Core tables built on demand, one MetaData per tenant.
Built tables are cached per process; the scanner drops the cache between
batches so tenant-scoped metadata never piles up on large networks.
"""
from typing import Dict

from sqlalchemy import (
    Column, Integer, Text, DateTime, MetaData, Table, Index,
)

_table_cache: Dict[int, 'TenantTables'] = {}


class TenantTables:
    """The options + comments tables for one tenant."""

    def __init__(self, tenant_id: int):
        self.tenant_id = tenant_id
        self.metadata = MetaData()
        prefix = table_prefix(tenant_id)

        self.options = Table(
            f'{prefix}options', self.metadata,
            Column('option_id', Integer, primary_key=True, autoincrement=True),
            Column('option_name', Text, nullable=False, unique=True),
            Column('option_value', Text),
        )

        self.comments = Table(
            f'{prefix}comments', self.metadata,
            Column('id', Integer, primary_key=True, autoincrement=True),
            Column('post_id', Integer, nullable=False, default=0),
            Column('author', Text, default=''),
            Column('author_email', Text, default=''),
            Column('content', Text, default=''),
            Column('status', Text, nullable=False),  # spam / pending / approved
            Column('date_gmt', DateTime, nullable=False),
            Index(f'ix_{prefix}comments_status_date', 'status', 'date_gmt'),
        )


def table_prefix(tenant_id: int) -> str:
    return f'site_{int(tenant_id)}_'


def tenant_tables(tenant_id: int) -> TenantTables:
    """Return (and cache) the table definitions for a tenant."""
    tables = _table_cache.get(tenant_id)
    if tables is None:
        tables = TenantTables(tenant_id)
        _table_cache[tenant_id] = tables
    return tables


def cached_tenant_count() -> int:
    return len(_table_cache)


def clear_tenant_table_cache():
    """Drop every cached tenant table definition."""
    _table_cache.clear()


def create_tenant_tables(bind, tenant_id: int) -> TenantTables:
    """Provision a tenant's options and comments tables (no-op if they exist)."""
    tables = tenant_tables(tenant_id)
    tables.metadata.create_all(bind)
    return tables
