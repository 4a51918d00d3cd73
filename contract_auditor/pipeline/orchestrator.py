"""
Fan-out/fan-in orchestration of the analysis passes
"""

import asyncio
import time
from typing import Dict, Optional, Sequence

from loguru import logger

from ..analyzers.passes import ANALYSIS_PASSES, AnalysisPass
from ..errors import BackendError
from ..models.reports import AuditReport
from ..models.sources import CompilationUnit
from ..nodes_config import config
from .core import AuditContext, PipelineStageState
from .report_compiler import ReportCompiler


class AuditOrchestrator:
    """
    Runs every analysis pass concurrently, then compiles their findings.

    The join is all-or-nothing: the first failing pass cancels the passes
    still in flight and fails the request, and the report compiler is never
    invoked with partial findings.
    """

    def __init__(
        self,
        llm,
        passes: Optional[Sequence[AnalysisPass]] = None,
        compiler: Optional[ReportCompiler] = None,
        pass_timeout: Optional[float] = None,
    ):
        """
        Initialize the orchestrator

        Args:
            llm: Generation backend shared by all passes
            passes: Analysis passes to run; defaults to the standard four
            compiler: Report compiler; built from ``llm`` and ``passes`` if omitted
            pass_timeout: Seconds allowed per pass; 0 disables, None uses PASS_TIMEOUT
        """
        self.llm = llm
        self.passes = tuple(passes) if passes is not None else ANALYSIS_PASSES
        names = [p.name for p in self.passes]
        if len(set(names)) != len(names):
            raise ValueError(f"Analysis pass names must be unique: {names}")
        self.compiler = compiler or ReportCompiler(llm, self.passes)
        self.pass_timeout = pass_timeout if pass_timeout is not None else config.PASS_TIMEOUT

    async def _run_pass(self, analysis_pass: AnalysisPass, unit: CompilationUnit) -> str:
        start = time.time()
        timeout = analysis_pass.timeout if analysis_pass.timeout is not None else self.pass_timeout
        try:
            if timeout:
                text = await asyncio.wait_for(analysis_pass.run(unit, self.llm), timeout)
            else:
                text = await analysis_pass.run(unit, self.llm)
        except asyncio.TimeoutError:
            raise BackendError(
                f"Analysis pass {analysis_pass.name} timed out after {timeout:g}s",
                stage=analysis_pass.name,
            )
        logger.info(f"Pass {analysis_pass.name} completed in {time.time() - start:.2f}s")
        return text

    async def _cancel(self, tasks) -> None:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def fan_out(self, unit: CompilationUnit) -> Dict[str, str]:
        """
        Run all passes concurrently against ``unit``

        Returns:
            Findings keyed by pass name, in pass-set order

        Raises:
            BackendError: If any pass fails or times out
        """
        logger.info(f"Running {len(self.passes)} analysis passes concurrently")
        tasks = {
            p.name: asyncio.create_task(self._run_pass(p, unit), name=f"analysis:{p.name}")
            for p in self.passes
        }

        try:
            done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            await self._cancel(list(tasks.values()))
            raise

        failures = {task for task in done if not task.cancelled() and task.exception() is not None}
        if failures:
            await self._cancel(list(pending))
            # Report the first failure in pass order so the error is deterministic
            for name, task in tasks.items():
                if task in failures:
                    logger.error(f"Pass {name} failed, cancelled {len(pending)} pass(es) in flight")
                    raise task.exception()

        return {name: task.result() for name, task in tasks.items()}

    async def run(self, unit: CompilationUnit, context: Optional[AuditContext] = None) -> AuditReport:
        """
        Analyze ``unit`` and compile the final report

        Args:
            unit: Assembled compilation unit
            context: Optional request context, advanced once every pass has answered

        Returns:
            The compiled audit report with the raw findings attached
        """
        findings = await self.fan_out(unit)
        if context is not None:
            context.advance(PipelineStageState.PASSES_COMPLETE)
        report_text = await self.compiler.compile(findings)
        return AuditReport(
            report=report_text,
            findings=findings,
            compilation_stats=unit.stats(),
        )
