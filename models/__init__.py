from models.application import TenantApplication
from models.audit import AuditEntry
from models.property import Property

__all__ = [
    "AuditEntry",
    "Property",
    "TenantApplication",
]
