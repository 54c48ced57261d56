"""
Feature audit module.

Checks a bootstrapped registry against its config table and reports
features that silently ended up disabled or misconfigured.
"""

from feature_registry.audit.core import (
    AuditResult,
    AuditRunner,
    CheckResult,
    CheckStatus,
)
from feature_registry.audit.reporter import AuditReporter

__all__ = [
    "AuditReporter",
    "AuditResult",
    "AuditRunner",
    "CheckResult",
    "CheckStatus",
]
