"""
Scan output: one TenantResult per enumerated tenant, wrapped in a ScanReport.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class TenantResult:
    tenant_id: int
    display_name: str
    home_url: str
    spam_count: int = 0
    pending_count: int = 0
    spam_ratio: float = 0.0
    keyword_hits: int = 0
    link_heavy_hits: int = 0
    flagged: bool = False
    error: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TenantResult':
        return cls(
            tenant_id=int(d['tenant_id']),
            display_name=d.get('display_name', ''),
            home_url=d.get('home_url', ''),
            spam_count=int(d.get('spam_count', 0)),
            pending_count=int(d.get('pending_count', 0)),
            spam_ratio=float(d.get('spam_ratio', 0.0)),
            keyword_hits=int(d.get('keyword_hits', 0)),
            link_heavy_hits=int(d.get('link_heavy_hits', 0)),
            flagged=bool(d.get('flagged', False)),
            error=d.get('error', '') or '',
        )


@dataclass
class ScanReport:
    scanned_at: datetime
    rows: List[TenantResult] = field(default_factory=list)

    @property
    def flagged_count(self) -> int:
        return sum(1 for row in self.rows if row.flagged)

    @property
    def error_count(self) -> int:
        return sum(1 for row in self.rows if row.error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scanned_at': self.scanned_at.isoformat(),
            'rows': [row.to_dict() for row in self.rows],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ScanReport':
        scanned_at = datetime.fromisoformat(d['scanned_at'])
        if scanned_at.tzinfo is None:
            scanned_at = scanned_at.replace(tzinfo=timezone.utc)
        return cls(
            scanned_at=scanned_at,
            rows=[TenantResult.from_dict(r) for r in d.get('rows', [])],
        )


def guess_home_url(domain: Optional[str], path: Optional[str], scheme: str = 'https') -> str:
    """Rebuild a tenant's public URL from directory metadata alone."""
    return f"{scheme}://{domain or 'example.com'}{path or '/'}"


def error_row(tenant, error: str, scheme: str = 'https') -> TenantResult:
    """
    Row for a tenant we skipped or failed on.

    Only directory metadata is used, never anything that would need the
    tenant's context. Counts stay zero and the row is never flagged.
    """
    return TenantResult(
        tenant_id=tenant.id,
        display_name=f'Site #{tenant.id}',
        home_url=guess_home_url(tenant.domain, tenant.path, scheme),
        error=error or 'Skipped: unknown error',
    )


def sort_rows(rows: List[TenantResult]) -> List[TenantResult]:
    """Flagged first, then spam_count descending. Stable for ties."""
    return sorted(rows, key=lambda row: (not row.flagged, -row.spam_count))


def build_report(rows: List[TenantResult], scanned_at: Optional[datetime] = None) -> ScanReport:
    return ScanReport(
        scanned_at=scanned_at or datetime.now(timezone.utc),
        rows=sort_rows(rows),
    )
