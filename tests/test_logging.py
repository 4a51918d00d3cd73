"""
Tests for logging setup and the LLM logging middleware
"""

import json

import pytest
from loguru import logger

from contract_auditor.llm.logging_middleware import LLMLogger, log_llm_call
from contract_auditor.utils.logger import setup_logger


class EchoBackend:
    provider = "stub"
    model_name = "echo"

    @log_llm_call
    async def generate(self, system_instruction, user_prompt, stage_name=None):
        if user_prompt == "fail":
            raise RuntimeError("boom")
        return user_prompt.upper()


@pytest.fixture
def llm_log_dir(tmp_path):
    LLMLogger.setup(str(tmp_path))
    yield tmp_path
    LLMLogger.teardown()


@pytest.mark.asyncio
async def test_llm_calls_are_logged(llm_log_dir):
    backend = EchoBackend()
    assert await backend.generate("system", "hello", stage_name="vulnerabilities") == "HELLO"
    with pytest.raises(RuntimeError):
        await backend.generate("system", "fail", stage_name="gas_optimization")
    logger.complete()

    lines = (llm_log_dir / "llm_interactions.jsonl").read_text().splitlines()
    messages = [json.loads(line)["record"]["message"] for line in lines]
    entries = [json.loads(message) for message in messages if message.startswith("{")]

    assert [entry["stage"] for entry in entries] == ["vulnerabilities", "gas_optimization"]
    assert entries[0]["request"] == {"system_chars": 6, "prompt_chars": 5}
    assert entries[0]["response"] == {"chars": 5}
    assert entries[1]["error_type"] == "RuntimeError"


def test_setup_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "audit.log"
    setup_logger(level="debug", log_file=str(log_file), rich_output=False)
    logger.info("assembled compilation unit")
    logger.complete()

    assert "assembled compilation unit" in log_file.read_text()
    setup_logger(level="INFO", rich_output=False)
