"""
Analysis pass set

Each pass asks the generation backend one differently framed question about
the same compilation unit. Passes do not depend on each other's output.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..models.sources import CompilationUnit
from . import prompts


@dataclass(frozen=True)
class AnalysisPass:
    """One independent analysis of the compilation unit"""

    name: str
    title: str
    instruction: str
    # Seconds allowed for this pass; None falls back to the orchestrator's timeout
    timeout: Optional[float] = None

    def build_prompt(self, unit: CompilationUnit) -> str:
        return prompts.ANALYSIS_PROMPT.format(code=unit.text)

    async def run(self, unit: CompilationUnit, llm) -> str:
        """
        Run this pass

        Args:
            unit: Compilation unit under audit
            llm: Backend exposing ``generate(system_instruction, user_prompt, stage_name)``

        Returns:
            The backend's findings text, verbatim
        """
        return await llm.generate(self.instruction, self.build_prompt(unit), stage_name=self.name)


COMPILATION_PASS = AnalysisPass(
    name="compilation",
    title="Compilation Check",
    instruction=prompts.COMPILATION_INSTRUCTION,
)

VULNERABILITY_PASS = AnalysisPass(
    name="vulnerabilities",
    title="Vulnerability Scan",
    instruction=prompts.VULNERABILITY_INSTRUCTION,
)

GAS_OPTIMIZATION_PASS = AnalysisPass(
    name="gas_optimization",
    title="Gas Optimization",
    instruction=prompts.GAS_INSTRUCTION,
)

BEST_PRACTICES_PASS = AnalysisPass(
    name="best_practices",
    title="Best Practices",
    instruction=prompts.BEST_PRACTICES_INSTRUCTION,
)

ANALYSIS_PASSES: Tuple[AnalysisPass, ...] = (
    COMPILATION_PASS,
    VULNERABILITY_PASS,
    GAS_OPTIMIZATION_PASS,
    BEST_PRACTICES_PASS,
)
