"""
Utility helpers for the contract auditor
"""

from .logger import setup_logger

__all__ = ["setup_logger"]
