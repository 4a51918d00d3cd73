"""
Audit pipeline for the contract auditor

This package wires source assembly, the concurrent analysis passes and the
report compiler into one request flow.
"""

from .core import AuditContext, PipelineStageState
from .report_compiler import ReportCompiler, REPORT_STAGE
from .orchestrator import AuditOrchestrator
from .audit import AuditService

__all__ = [
    "AuditContext",
    "PipelineStageState",
    "ReportCompiler",
    "REPORT_STAGE",
    "AuditOrchestrator",
    "AuditService",
]
