"""
Settings persistence — the single audit_settings row.

Loads never block a scan: if the row cannot be read the defaults are used.
Saves re-raise after rollback so the caller can report the failure.
"""
import logging
from typing import Any, Dict

from spam_auditor import database
from spam_auditor.models.audit_settings import AuditSettingsRecord, SETTINGS_ROW_ID
from spam_auditor.scanner.settings import AuditSettings, default_settings, sanitize_settings

logger = logging.getLogger('services.settings_store')


def load_settings() -> AuditSettings:
    """Saved values merged over defaults, then sanitized."""
    merged: Dict[str, Any] = default_settings()
    session = database.get_session()
    try:
        record = session.get(AuditSettingsRecord, SETTINGS_ROW_ID)
        if record is not None and isinstance(record.values, dict):
            merged.update(record.values)
    except Exception:
        session.rollback()
        logger.error("Failed to load audit settings, using defaults", exc_info=True)
    finally:
        session.close()
    return sanitize_settings(merged)


def save_settings(raw: Dict[str, Any]) -> AuditSettings:
    """Sanitize (clamp) and store settings, replacing whatever was saved before."""
    settings = sanitize_settings(raw)
    session = database.get_session()
    try:
        record = session.get(AuditSettingsRecord, SETTINGS_ROW_ID)
        if record is None:
            record = AuditSettingsRecord(id=SETTINGS_ROW_ID)
            session.add(record)
        record.values = settings.to_dict()
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Failed to save audit settings", exc_info=True)
        raise
    finally:
        session.close()
    logger.info("Audit settings saved")
    return settings
