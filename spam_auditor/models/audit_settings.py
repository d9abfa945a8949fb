"""
Network-wide audit settings — a single row holding the saved values as JSON.
"""
from sqlalchemy import Column, Integer, DateTime, JSON
from sqlalchemy.sql import func

from spam_auditor.database import Base

SETTINGS_ROW_ID = 1


class AuditSettingsRecord(Base):
    __tablename__ = 'audit_settings'

    id = Column(Integer, primary_key=True)
    values = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
