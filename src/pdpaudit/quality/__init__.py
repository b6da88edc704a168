"""
Audit rule engine: content checks, scoring and suggested corrections.
"""

from .auditor import AuditField, AuditResult, AuditRow, Auditor, ImagesAuditField, degraded_result
from .rules import AuditRules

__all__ = [
    "AuditField",
    "AuditResult",
    "AuditRow",
    "AuditRules",
    "Auditor",
    "ImagesAuditField",
    "degraded_result",
]
