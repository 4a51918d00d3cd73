"""
Data models for the contract auditor
"""

from .sources import SourceUnit, ResolvedBlock, CompilationUnit, AuditRequest, DIRECT_CODE_LABEL
from .reports import AuditReport

__all__ = [
    "SourceUnit",
    "ResolvedBlock",
    "CompilationUnit",
    "AuditRequest",
    "AuditReport",
    "DIRECT_CODE_LABEL",
]
