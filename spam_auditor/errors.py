"""
Error taxonomy for the network scanner.

Tenant-level errors never escape the tenant boundary; they end up as the
`error` column of that tenant's row. ScanInProgressError is raised by the
boundary layer only, never by the scanner itself.
"""


class AuditError(Exception):
    """Base class for spam auditor errors."""


class CorruptTenantConfig(AuditError):
    """Tenant's stored role configuration is absent or not a mapping."""

    def __init__(self, tenant_id, reason):
        self.tenant_id = tenant_id
        self.reason = reason
        super().__init__(reason)


class TenantContextError(AuditError):
    """Entering a tenant's data context failed."""

    def __init__(self, tenant_id, reason):
        self.tenant_id = tenant_id
        super().__init__(f"cannot enter site #{tenant_id}: {reason}")


class ScanInProgressError(AuditError):
    """Another scan holds the run lock."""

    def __init__(self):
        super().__init__("A network scan is already running")
