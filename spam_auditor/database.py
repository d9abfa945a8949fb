"""
Database engine + session factory for the network database.

Defaults to SQLite for local dev, Postgres in production. The site directory,
the audit settings row and every site's options/comments tables all live in
this one database, so the network session and each per-site session are
drawn from the same engine. Only `sites` and `audit_settings` hang off
Base.metadata and are migrated by Alembic; per-site tables are provisioned
with the site (see models.tenant_tables) and are never created here.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from spam_auditor.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


# Some hosts inject postgres:// but SQLAlchemy 2.x requires postgresql://
url = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

if url.startswith('sqlite'):
    engine = create_engine(url, connect_args={'check_same_thread': False})
else:
    engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)

SessionLocal = sessionmaker(bind=engine)


def get_session():
    """Return a new DB session."""
    return SessionLocal()
