"""
Active sites in the network directory, counted and paged by id.

Deleted, archived and spam-marked sites are never enumerated.
"""
from dataclasses import dataclass
from typing import List

from sqlalchemy import select, func

from spam_auditor.models.site import Site


@dataclass(frozen=True)
class TenantMeta:
    id: int
    domain: str
    path: str


def _active():
    return (
        Site.deleted.is_(False),
        Site.archived.is_(False),
        Site.spam.is_(False),
    )


class TenantDirectory:
    def __init__(self, session):
        self.session = session

    def count_active(self) -> int:
        stmt = select(func.count()).select_from(Site).where(*_active())
        return int(self.session.execute(stmt).scalar_one())

    def page(self, offset: int, limit: int) -> List[TenantMeta]:
        """Return one slice of active tenants as plain metadata (no ORM objects)."""
        stmt = (
            select(Site.id, Site.domain, Site.path)
            .where(*_active())
            .order_by(Site.id)
            .offset(offset)
            .limit(limit)
        )
        return [
            TenantMeta(id=row.id, domain=row.domain, path=row.path)
            for row in self.session.execute(stmt)
        ]
