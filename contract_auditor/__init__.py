"""
Contract Auditor

Assembles smart contract sources with their on-disk library imports, runs
four LLM analysis passes over them concurrently and compiles one report.
"""

__version__ = "0.1.0"

from .errors import (
    AuditError,
    NoInputError,
    UnsupportedInputError,
    SourceReadError,
    ConfigurationError,
    BackendError,
    RepositoryFetchError,
)
from .models import AuditRequest, AuditReport, CompilationUnit, ResolvedBlock, SourceUnit
from .pipeline import AuditService, AuditOrchestrator, ReportCompiler
from .sources import SourceAssembler, DependencyResolver, LibraryLoader, extract_imports

__all__ = [
    "AuditError",
    "NoInputError",
    "UnsupportedInputError",
    "SourceReadError",
    "ConfigurationError",
    "BackendError",
    "RepositoryFetchError",
    "AuditRequest",
    "AuditReport",
    "CompilationUnit",
    "ResolvedBlock",
    "SourceUnit",
    "AuditService",
    "AuditOrchestrator",
    "ReportCompiler",
    "SourceAssembler",
    "DependencyResolver",
    "LibraryLoader",
    "extract_imports",
]
