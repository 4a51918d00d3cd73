"""
End-to-end audit of one submission
"""

from typing import List, Optional

from loguru import logger

from ..errors import AuditError
from ..llm.adapter import LLMAdapter
from ..models.reports import AuditReport
from ..models.sources import AuditRequest, SourceUnit
from ..sources.assembler import SourceAssembler
from ..sources.repository import RepositoryFetcher
from .core import AuditContext, PipelineStageState
from .orchestrator import AuditOrchestrator


class AuditService:
    """
    Runs the whole pipeline for one request:
    credentials -> sources -> compilation unit -> passes -> report.
    """

    def __init__(
        self,
        llm: Optional[LLMAdapter] = None,
        assembler: Optional[SourceAssembler] = None,
        orchestrator: Optional[AuditOrchestrator] = None,
        fetcher: Optional[RepositoryFetcher] = None,
    ):
        self.llm = llm or LLMAdapter()
        self.assembler = assembler or SourceAssembler()
        self.orchestrator = orchestrator or AuditOrchestrator(self.llm)
        self.fetcher = fetcher or RepositoryFetcher()

    async def collect_sources(self, request: AuditRequest) -> List[SourceUnit]:
        """Uploaded files, pasted code, then any fetched repository files"""
        sources = request.source_units()
        if request.repository_url and request.repository_url.strip():
            sources.extend(await self.fetcher.fetch(request.repository_url, request.repository_branch))
        return sources

    async def audit(self, request: AuditRequest, context: Optional[AuditContext] = None) -> AuditReport:
        """
        Audit one submission

        Args:
            request: Files, pasted code and optional repository URL
            context: Optional context to record timings on

        Returns:
            The compiled audit report

        Raises:
            ConfigurationError: If the backend credential is missing
            NoInputError: If no non-empty source was provided
            UnsupportedInputError: If the repository URL is not accepted
            RepositoryFetchError: If the repository could not be cloned
            BackendError: If any backend call fails
        """
        context = context or AuditContext()
        logger.info(f"[{context.request_id}] Audit started")

        try:
            # Surface configuration problems before touching any input
            self.llm.ensure_credentials()

            async with context.timed("collect_sources"):
                sources = await self.collect_sources(request)
            context.advance(PipelineStageState.SOURCES_COLLECTED)

            async with context.timed("assemble"):
                unit = await self.assembler.assemble(sources)
            context.advance(PipelineStageState.UNIT_ASSEMBLED)
            for block in unit.failed_blocks:
                context.add_error("assemble", f"unresolved import {block.ref}: {block.error}")

            async with context.timed("analysis"):
                report = await self.orchestrator.run(unit, context)
            context.advance(PipelineStageState.REPORT_COMPILED)
        except AuditError as e:
            context.advance(PipelineStageState.ERROR)
            logger.warning(f"[{context.request_id}] Audit failed ({e.category}): {e.message}")
            raise

        summary = context.to_dict()
        report.metadata.update({
            "request_id": summary["request_id"],
            "model": getattr(self.llm, "model_name", None),
            "stage": summary["stage"],
            "stage_timings": dict(summary["metrics"]["stage_timings"]),
            "errors": list(summary["errors"]),
        })
        logger.info(f"[{context.request_id}] Audit completed")
        return report
