"""
Logging utilities for the contract auditor
"""

import os
import sys
from typing import Optional

from loguru import logger
from rich.logging import RichHandler

from ..llm.logging_middleware import LLMLogger

DEFAULT_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: Optional[str] = None,
    llm_log_dir: Optional[str] = None,
    rich_output: bool = True,
) -> None:
    """
    Set up logger configuration

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a rotating log file
        llm_log_dir: Optional directory for the LLM interaction sinks
        rich_output: Render console output through rich
    """
    level = level.upper()
    LLMLogger.teardown()
    logger.remove()

    if rich_output:
        logger.add(
            RichHandler(rich_tracebacks=True, markup=False, show_path=False),
            format="{message}",
            level=level,
        )
    else:
        logger.add(sys.stderr, level=level)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        logger.add(
            log_file,
            format=DEFAULT_FILE_FORMAT,
            level=level,
            rotation="10 MB",
            retention=10,
        )

    if llm_log_dir:
        LLMLogger.setup(llm_log_dir)

    logger.debug(f"Logging configured at level {level}")
