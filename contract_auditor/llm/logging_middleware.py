"""
Logging middleware for LLM interactions

This module records every call made to the generation backend: which
analysis stage asked, how big the prompt was, how long the call took and
whether it failed.
"""

import time
import json
import uuid
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional
from loguru import logger

class LLMLogger:
    """Logger specifically for LLM interactions"""

    _sink_ids = []

    @staticmethod
    def setup(log_dir: str = "logs"):
        """Set up LLM-specific sinks under ``log_dir``"""
        if LLMLogger._sink_ids:
            return

        directory = Path(log_dir)
        LLMLogger._sink_ids.append(logger.add(
            str(directory / "llm_interactions.log"),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}",
            level="DEBUG",
            rotation="10 MB",
            retention=10,
            filter=lambda record: record["extra"].get("llm_log", False)
        ))

        # JSON sink for structured logging
        LLMLogger._sink_ids.append(logger.add(
            str(directory / "llm_interactions.jsonl"),
            serialize=True,
            format="{message}",
            level="DEBUG",
            rotation="10 MB",
            retention=10,
            filter=lambda record: record["extra"].get("llm_log", False)
        ))

    @staticmethod
    def teardown():
        """Remove the sinks added by :meth:`setup`"""
        for sink_id in LLMLogger._sink_ids:
            logger.remove(sink_id)
        LLMLogger._sink_ids = []

    @staticmethod
    def log_interaction(
        request_id: str,
        provider: str,
        model: str,
        stage: str,
        request_data: Dict[str, Any],
        response_data: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log a complete LLM interaction"""
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "request_id": request_id,
            "provider": provider,
            "model": model,
            "stage": stage,
            "request": request_data,
            "duration_ms": duration_ms,
        }

        if response_data:
            log_entry["response"] = response_data

        if error:
            log_entry["error"] = str(error)
            log_entry["error_type"] = type(error).__name__

        logger.bind(llm_log=True).debug(json.dumps(log_entry))

        if error:
            logger.error(
                f"LLM {provider}/{model} [{stage}] request {request_id} failed after {duration_ms:.2f}ms: {error}"
            )
        else:
            logger.info(
                f"LLM {provider}/{model} [{stage}] request {request_id} completed in {duration_ms:.2f}ms"
            )

def log_llm_call(func):
    """Decorator to log calls to ``generate(system_instruction, user_prompt, stage_name=...)``"""
    @wraps(func)
    async def async_wrapper(self, system_instruction: str, user_prompt: str, stage_name: Optional[str] = None):
        request_id = uuid.uuid4().hex[:12]
        start_time = time.time()
        provider = getattr(self, "provider", "unknown")
        model = getattr(self, "model_name", "unknown")
        stage = stage_name or func.__name__

        # Sizes only; prompts carry user code and can be very large
        request_data = {
            "system_chars": len(system_instruction),
            "prompt_chars": len(user_prompt),
        }

        logger.bind(llm_log=True).debug(f"LLM request {request_id} to {provider}/{model} [{stage}]")

        try:
            response = await func(self, system_instruction, user_prompt, stage_name)
        except Exception as e:
            LLMLogger.log_interaction(
                request_id=request_id,
                provider=provider,
                model=model,
                stage=stage,
                request_data=request_data,
                error=e,
                duration_ms=(time.time() - start_time) * 1000
            )
            raise

        LLMLogger.log_interaction(
            request_id=request_id,
            provider=provider,
            model=model,
            stage=stage,
            request_data=request_data,
            response_data={"chars": len(response)},
            duration_ms=(time.time() - start_time) * 1000
        )
        return response

    return async_wrapper
