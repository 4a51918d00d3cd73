"""
Recursive, cycle-safe resolution of library imports
"""

from typing import Iterable, List, Optional, Sequence, Set

from loguru import logger

from ..errors import LibraryLoadError
from ..models.sources import ResolvedBlock
from ..nodes_config import config
from .imports import extract_imports
from .library import LibraryLoader


class DependencyResolver:
    """
    Resolves import paths into library source blocks.

    Traversal is depth-first pre-order: a library's own text precedes the
    libraries it imports, and sibling imports keep their written order.
    An explicit stack replaces recursion so that long import chains cannot
    exhaust the interpreter stack.
    """

    def __init__(
        self,
        loader: Optional[LibraryLoader] = None,
        namespaces: Optional[Sequence[str]] = None,
        max_libraries: Optional[int] = None,
    ):
        """
        Initialize the resolver

        Args:
            loader: Library lookup collaborator, anything with ``async load(ref) -> str``
            namespaces: Recognized import prefixes; defaults to the loader's remappings
            max_libraries: Ceiling on libraries loaded per visited set
        """
        self.loader = loader or LibraryLoader()
        if namespaces is None:
            namespaces = getattr(self.loader, "namespaces", None)
        self.namespaces = list(namespaces) if namespaces is not None else None
        self.max_libraries = max_libraries if max_libraries is not None else config.MAX_RESOLVED_LIBRARIES

    async def resolve(self, ref: str, visited: Set[str]) -> List[ResolvedBlock]:
        """
        Resolve ``ref`` and everything it transitively imports

        Args:
            ref: Import path to resolve
            visited: Refs already resolved or in progress; updated in place

        Returns:
            Blocks for every newly visited ref, failures included
        """
        blocks: List[ResolvedBlock] = []
        stack = [ref]

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)

            if self.max_libraries and len(visited) > self.max_libraries:
                logger.warning(f"Library limit reached, skipping {current}")
                blocks.append(ResolvedBlock(
                    ref=current,
                    ok=False,
                    error=f"dependency limit of {self.max_libraries} libraries reached",
                ))
                continue

            try:
                text = await self.loader.load(current)
            except LibraryLoadError as e:
                logger.warning(f"Could not resolve import {current}: {e}")
                blocks.append(ResolvedBlock(ref=current, ok=False, error=str(e)))
                continue

            blocks.append(ResolvedBlock(ref=current, text=text))

            children = extract_imports(text, namespaces=self.namespaces, base_ref=current)
            # Reversed so the first written import is popped first
            stack.extend(reversed(children))

        return blocks

    async def resolve_all(self, refs: Iterable[str], visited: Set[str]) -> List[ResolvedBlock]:
        """Resolve several root imports against one shared visited set"""
        blocks: List[ResolvedBlock] = []
        for ref in refs:
            blocks.extend(await self.resolve(ref, visited))
        return blocks
