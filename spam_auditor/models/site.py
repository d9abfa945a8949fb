"""
Site model — one row per tenant in the network directory.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, Index
from sqlalchemy.sql import func

from spam_auditor.database import Base


class Site(Base):
    __tablename__ = 'sites'

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(Text, nullable=False)
    path = Column(Text, nullable=False, default='/')
    deleted = Column(Boolean, nullable=False, default=False)
    archived = Column(Boolean, nullable=False, default=False)
    spam = Column(Boolean, nullable=False, default=False)  # the site itself, not its comments
    registered = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_sites_active', 'deleted', 'archived', 'spam'),
    )
