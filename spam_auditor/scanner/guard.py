"""
Tenant guard — classify a tenant as safe or corrupt before entering it.

Entering a tenant whose role configuration is malformed can take the whole
process down, so the roles option is read straight from the tenant's options
table through the network session, without acquiring the tenant context.
Nothing in here raises: every failure becomes a Corrupt verdict.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from spam_auditor.config import ROLES_OPTION
from spam_auditor.errors import CorruptTenantConfig
from spam_auditor.models.tenant_tables import tenant_tables

logger = logging.getLogger('scanner.guard')

MISSING_ROLES = f'Skipped: {ROLES_OPTION} missing'
INVALID_ROLES = f'Skipped: invalid {ROLES_OPTION} (not a mapping)'
UNREADABLE_ROLES = f'Skipped: {ROLES_OPTION} unreadable'


@dataclass(frozen=True)
class GuardVerdict:
    safe: bool
    reason: str = ''


SAFE = GuardVerdict(safe=True)


def read_raw_roles(session, tenant_id: int):
    """Raw stored value of the roles option, or None if the row is absent."""
    options = tenant_tables(tenant_id).options
    stmt = (
        select(options.c.option_value)
        .where(options.c.option_name == ROLES_OPTION)
        .limit(1)
    )
    return session.execute(stmt).scalar_one_or_none()


def decode_roles(tenant_id: int, raw) -> Dict[str, Any]:
    """Deserialize a roles option value, raising CorruptTenantConfig on any bad shape."""
    if raw is None:
        raise CorruptTenantConfig(tenant_id, MISSING_ROLES)
    if isinstance(raw, bytes):
        raw = raw.decode('utf-8', errors='replace')
    try:
        value = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        raise CorruptTenantConfig(tenant_id, INVALID_ROLES)
    if not isinstance(value, dict):
        raise CorruptTenantConfig(tenant_id, INVALID_ROLES)
    return value


def inspect(session, tenant_id: int) -> GuardVerdict:
    try:
        raw = read_raw_roles(session, tenant_id)
    except SQLAlchemyError as e:
        # Leave the network session usable for the next tenant
        session.rollback()
        logger.warning("Site #%d: roles lookup failed: %s", tenant_id, e,
                       extra={'tenant_id': tenant_id})
        return GuardVerdict(safe=False, reason=UNREADABLE_ROLES)
    except Exception as e:
        logger.warning("Site #%d: roles lookup failed: %s", tenant_id, e,
                       extra={'tenant_id': tenant_id})
        return GuardVerdict(safe=False, reason=UNREADABLE_ROLES)

    try:
        decode_roles(tenant_id, raw)
    except CorruptTenantConfig as e:
        return GuardVerdict(safe=False, reason=e.reason)
    except Exception as e:
        logger.warning("Site #%d: roles check failed: %s", tenant_id, e,
                       extra={'tenant_id': tenant_id})
        return GuardVerdict(safe=False, reason=INVALID_ROLES)
    return SAFE
