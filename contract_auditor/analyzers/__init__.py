"""
Analyzers for the contract auditor
"""

from .passes import (
    AnalysisPass,
    ANALYSIS_PASSES,
    COMPILATION_PASS,
    VULNERABILITY_PASS,
    GAS_OPTIMIZATION_PASS,
    BEST_PRACTICES_PASS,
)

__all__ = [
    "AnalysisPass",
    "ANALYSIS_PASSES",
    "COMPILATION_PASS",
    "VULNERABILITY_PASS",
    "GAS_OPTIMIZATION_PASS",
    "BEST_PRACTICES_PASS",
]
