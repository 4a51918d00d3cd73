"""
Assembly of submitted sources and their libraries into one compilation unit
"""

from typing import List, Optional, Sequence

from loguru import logger

from ..errors import NoInputError
from ..models.sources import CompilationUnit, SourceUnit
from .imports import extract_imports
from .resolver import DependencyResolver


class SourceAssembler:
    """Builds the compilation unit every analysis pass receives"""

    def __init__(self, resolver: Optional[DependencyResolver] = None):
        self.resolver = resolver or DependencyResolver()

    async def assemble(self, sources: Sequence[SourceUnit]) -> CompilationUnit:
        """
        Concatenate sources and inline every library they reach

        Args:
            sources: Submitted sources in submission order

        Returns:
            Compilation unit with user sources first, then resolved libraries

        Raises:
            NoInputError: If every source is empty after trimming whitespace
        """
        units: List[SourceUnit] = [source for source in sources if not source.is_blank]
        if not units:
            raise NoInputError("No contract source provided: upload a file or paste code")

        refs: List[str] = []
        for unit in units:
            refs.extend(extract_imports(unit.text, namespaces=self.resolver.namespaces))

        # One visited set per request so shared libraries are fetched once
        visited = set()
        blocks = await self.resolver.resolve_all(refs, visited)

        unit = CompilationUnit(sources=units, blocks=blocks)
        failed = unit.failed_blocks
        logger.info(
            f"Assembled {len(units)} source(s) with {len(blocks)} library block(s)"
            + (f", {len(failed)} unresolved" if failed else "")
        )
        return unit
