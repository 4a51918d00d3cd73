"""
Source intake and assembly

Turns submitted files, pasted code and remote repositories into one
compilation unit with every reachable library inlined.
"""

from .imports import extract_imports, IMPORT_PATTERN
from .library import LibraryLoader, parse_remappings
from .resolver import DependencyResolver
from .assembler import SourceAssembler
from .repository import RepositoryFetcher

__all__ = [
    "extract_imports",
    "IMPORT_PATTERN",
    "LibraryLoader",
    "parse_remappings",
    "DependencyResolver",
    "SourceAssembler",
    "RepositoryFetcher",
]
