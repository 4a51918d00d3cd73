"""
Shared fakes for the contract auditor tests
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from contract_auditor.errors import BackendError, LibraryLoadError

NAMESPACES = ["@openzeppelin/"]


class FakeLibraryLoader:
    """In-memory library lookup keyed by import path"""

    namespaces = NAMESPACES

    def __init__(self, files: Dict[str, str]):
        self.files = files
        self.loads: List[str] = []

    async def load(self, ref: str) -> str:
        self.loads.append(ref)
        if ref not in self.files:
            raise LibraryLoadError(ref, f"library file not found: {ref}")
        return self.files[ref]


class StubLLM:
    """
    Generation backend double.

    Responses are keyed by stage name; ``failures`` raise BackendError for a
    stage and ``delays`` hold a stage back before it answers.
    """

    model_name = "stub-model"
    provider = "stub"

    def __init__(
        self,
        responses: Optional[Dict[str, str]] = None,
        failures: Optional[Dict[str, str]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.responses = responses or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: List[Dict[str, str]] = []
        self.cancelled: List[str] = []
        self.credentials_checked = 0

    def ensure_credentials(self) -> None:
        self.credentials_checked += 1

    async def generate(self, system_instruction: str, user_prompt: str, stage_name: Optional[str] = None) -> str:
        self.calls.append({
            "stage": stage_name,
            "system": system_instruction,
            "prompt": user_prompt,
        })
        try:
            if stage_name in self.delays:
                await asyncio.sleep(self.delays[stage_name])
        except asyncio.CancelledError:
            self.cancelled.append(stage_name)
            raise
        if stage_name in self.failures:
            raise BackendError(self.failures[stage_name], stage=stage_name)
        return self.responses.get(stage_name, f"findings from {stage_name}")

    def stages(self) -> List[str]:
        return [call["stage"] for call in self.calls]


@pytest.fixture
def stub_llm():
    return StubLLM()
