"""Shared test fixtures."""
import json
import logging
from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy import create_engine, insert
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spam_auditor.database import Base
from spam_auditor.models.tenant_tables import clear_tenant_table_cache, create_tenant_tables, tenant_tables

# Fixed scan time so lookback windows are deterministic
NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

ROLES = {
    'administrator': {'name': 'Administrator', 'capabilities': {'moderate_comments': True}},
}


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created, shared by every session."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    import spam_auditor.models.site
    import spam_auditor.models.audit_settings
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Session for arranging test data. Fixtures commit so other sessions see it."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(session_factory):
    """Route every get_session() call to a fresh session on the test engine."""
    with patch('spam_auditor.database.get_session', side_effect=lambda: session_factory()):
        yield


@pytest.fixture(autouse=True)
def reset_tenant_table_cache():
    clear_tenant_table_cache()
    yield
    clear_tenant_table_cache()


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """create_app() and the CLI reconfigure the root logger; put it back."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


@pytest.fixture
def mock_redis():
    """Mock Redis client. get() misses, lock() always acquires."""
    mock = MagicMock()
    mock.get.return_value = None
    mock.set.return_value = True
    mock.lock.return_value.acquire.return_value = True
    with patch('spam_auditor.extensions.redis_client', mock):
        yield mock


@pytest.fixture
def app():
    """Flask test app."""
    from spam_auditor import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_site(db_session):
    """
    Factory fixture. Provisions a site with its options and comments tables.

    roles: dict (stored as JSON), str (stored verbatim) or None (no roles row).
    """
    from spam_auditor.models.site import Site

    def _make(domain='net.example.test', path='/', name='Test Site', home=None,
              roles=ROLES, with_tables=True, with_comments=True, **flags):
        site = Site(domain=domain, path=path, **flags)
        db_session.add(site)
        db_session.flush()

        if with_tables:
            tables = create_tenant_tables(db_session.connection(), site.id)
            if not with_comments:
                tables.comments.drop(db_session.connection())
            options = [
                {'option_name': 'blogname', 'option_value': name},
                {'option_name': 'home', 'option_value': home or f'https://{domain}{path}'},
            ]
            if roles is not None:
                options.append({
                    'option_name': 'user_roles',
                    'option_value': roles if isinstance(roles, str) else json.dumps(roles),
                })
            db_session.execute(insert(tables.options), options)

        db_session.commit()
        return site
    return _make


@pytest.fixture
def add_comments(db_session):
    """Factory fixture: inserts `count` comments for a site, `days_ago` before NOW."""
    def _add(site, status, count, content='Nice post!', days_ago=1):
        if count <= 0:
            return
        comments = tenant_tables(site.id).comments
        when = (NOW - timedelta(days=days_ago)).replace(tzinfo=None)
        db_session.execute(insert(comments), [
            {'post_id': 1, 'author': 'visitor', 'content': content, 'status': status, 'date_gmt': when}
            for _ in range(count)
        ])
        db_session.commit()
    return _add


@pytest.fixture
def scan_now():
    return NOW


@pytest.fixture
def since(scan_now):
    """Default 14-day lookback boundary, naive UTC like stored comment dates."""
    return (scan_now - timedelta(days=14)).replace(tzinfo=None)


@pytest.fixture
def frozen_clock(scan_now):
    """Pin the scanner's clock to NOW for scans triggered without an explicit time."""
    with patch('spam_auditor.scanner.scheduler.utcnow', return_value=scan_now):
        yield scan_now
