"""
Report compiler: the fan-in step that merges pass findings into one report
"""

from typing import Dict, Optional, Sequence

from loguru import logger

from ..analyzers import prompts
from ..analyzers.passes import ANALYSIS_PASSES, AnalysisPass
from ..errors import AuditError

REPORT_STAGE = "report_compiler"


class ReportCompiler:
    """Asks the backend to interleave the pass findings into a structured report"""

    def __init__(self, llm, passes: Optional[Sequence[AnalysisPass]] = None):
        self.llm = llm
        self.passes = tuple(passes) if passes is not None else ANALYSIS_PASSES

    def build_prompt(self, findings: Dict[str, str]) -> str:
        expected = [p.name for p in self.passes]
        missing = [name for name in expected if name not in findings]
        unexpected = [name for name in findings if name not in expected]
        if missing or unexpected:
            raise AuditError(
                f"Report compiler received mismatched findings (missing: {missing}, unexpected: {unexpected})"
            )

        # Section order follows the pass set, not completion order
        sections = [
            prompts.REPORT_SECTION.format(title=p.title, name=p.name, findings=findings[p.name].strip())
            for p in self.passes
        ]
        return prompts.REPORT_PROMPT.format(sections="\n\n".join(sections))

    async def compile(self, findings: Dict[str, str]) -> str:
        """
        Produce the final report text

        Args:
            findings: Findings keyed by pass name, one entry per pass

        Returns:
            Report text from the backend, verbatim
        """
        prompt = self.build_prompt(findings)
        logger.info(f"Compiling report from {len(findings)} findings")
        return await self.llm.generate(
            prompts.REPORT_COMPILER_INSTRUCTION,
            prompt,
            stage_name=REPORT_STAGE,
        )
