"""
Tenant context — a scoped handle onto one tenant's data.

    with acquire(tenant) as handle:
        handle.display_name(), handle.home_url()
        handle.count(...)

Each handle owns its own session, so only the tables of that tenant are
reachable through it. The session is closed on every path out of the block,
including failures inside it. If entering fails, whatever was opened is
closed before TenantContextError propagates.
"""
import logging
from contextlib import contextmanager
from typing import Callable, Optional

from sqlalchemy import select, func, inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from spam_auditor import database
from spam_auditor.config import NAME_OPTION, HOME_OPTION, SITE_SCHEME
from spam_auditor.errors import TenantContextError
from spam_auditor.models.tenant_tables import tenant_tables
from spam_auditor.scanner.results import guess_home_url

logger = logging.getLogger('scanner.context')


class TenantHandle:
    """Entered tenant: metadata lookups plus COUNT queries over its comments."""

    def __init__(self, tenant, session, tables):
        self.tenant = tenant
        self.tenant_id = tenant.id
        self.session = session
        self.tables = tables
        self.comments = tables.comments

    def _option(self, name: str) -> Optional[str]:
        options = self.tables.options
        stmt = select(options.c.option_value).where(options.c.option_name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def display_name(self) -> str:
        return self._option(NAME_OPTION) or ''

    def home_url(self) -> str:
        return self._option(HOME_OPTION) or guess_home_url(
            self.tenant.domain, self.tenant.path, SITE_SCHEME)

    def count(self, *criteria) -> int:
        """SELECT COUNT(*) over this tenant's comments matching all criteria."""
        stmt = select(func.count()).select_from(self.comments).where(*criteria)
        return int(self.session.execute(stmt).scalar_one())


def _enter(tenant, session) -> TenantHandle:
    tables = tenant_tables(tenant.id)
    try:
        inspector = sa_inspect(session.connection())
        for table in (tables.options, tables.comments):
            if not inspector.has_table(table.name):
                raise TenantContextError(tenant.id, f'table {table.name} does not exist')
    except SQLAlchemyError as e:
        raise TenantContextError(tenant.id, str(e)) from e
    return TenantHandle(tenant, session, tables)


@contextmanager
def acquire(tenant, session_factory: Optional[Callable] = None):
    """Enter a tenant's context for the duration of the block."""
    factory = session_factory or database.get_session
    session = factory()
    try:
        handle = _enter(tenant, session)
    except Exception:
        session.close()
        raise

    logger.debug("Entered site #%d", tenant.id, extra={'tenant_id': tenant.id})
    try:
        yield handle
    finally:
        session.close()
        logger.debug("Left site #%d", tenant.id, extra={'tenant_id': tenant.id})
