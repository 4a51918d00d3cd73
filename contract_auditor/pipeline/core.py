"""
Core pipeline module for the contract auditor

This module provides the per-request context that flows through the audit
pipeline: identifiers, stage timings and recorded errors.
"""

import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from loguru import logger


class PipelineStageState(Enum):
    """
    Enum representing the current processing stage of a request
    """
    INIT = auto()                # Request received
    SOURCES_COLLECTED = auto()   # Uploads, pasted code and repository files gathered
    UNIT_ASSEMBLED = auto()      # Libraries resolved into the compilation unit
    PASSES_COMPLETE = auto()     # All analysis passes returned
    REPORT_COMPILED = auto()     # Final report produced
    ERROR = auto()               # Processing error


class AuditContext:
    """
    Pipeline context for one audit request

    Nothing here is shared between requests.
    """

    def __init__(self, request_id: Optional[str] = None):
        """
        Initialize an audit context

        Args:
            request_id: Unique identifier for the request
        """
        self.request_id = request_id or f"audit_{uuid.uuid4().hex[:8]}"
        self.created_at = datetime.now()
        self.stage = PipelineStageState.INIT

        self.metrics: Dict[str, Any] = {
            "stage_timings": {},
            "error_count": 0,
            "start_time": time.time(),
        }
        self.errors: List[Dict[str, Optional[str]]] = []

    def advance(self, stage: PipelineStageState) -> None:
        self.stage = stage
        logger.debug(f"[{self.request_id}] stage -> {stage.name}")

    def add_error(
        self,
        stage: str,
        message: str,
        exception: Optional[Exception] = None
    ) -> None:
        """
        Add an error to the context

        Args:
            stage: Pipeline stage where the error occurred
            message: Error message
            exception: Optional exception object
        """
        self.errors.append({
            "stage": stage,
            "message": message,
            "timestamp": datetime.now().isoformat(),
            "exception": str(exception) if exception else None,
        })
        self.metrics["error_count"] += 1
        logger.error(f"[{self.request_id}] Error in {stage}: {message}")

    def update_metrics(self, stage_name: str, duration: float) -> None:
        """
        Record how long a stage took

        Args:
            stage_name: Name of the pipeline stage
            duration: Duration in seconds
        """
        self.metrics["stage_timings"][stage_name] = duration
        self.metrics["total_duration"] = time.time() - self.metrics["start_time"]

    @asynccontextmanager
    async def timed(self, stage_name: str):
        """Time the enclosed block and record it under ``stage_name``"""
        start = time.time()
        try:
            yield
        finally:
            duration = time.time() - start
            self.update_metrics(stage_name, duration)
            logger.info(f"[{self.request_id}] {stage_name} finished in {duration:.2f}s")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert context to dictionary

        Returns:
            Dictionary representation of the context
        """
        return {
            "request_id": self.request_id,
            "created_at": self.created_at.isoformat(),
            "stage": self.stage.name,
            "metrics": self.metrics,
            "errors": self.errors,
        }
