"""
Generation backend integration
"""

from .adapter import LLMAdapter, SUPPORTED_PROVIDERS
from .logging_middleware import LLMLogger, log_llm_call

__all__ = ["LLMAdapter", "SUPPORTED_PROVIDERS", "LLMLogger", "log_llm_call"]
