"""
Adapter for LlamaIndex LLM integrations

Every analysis pass and the report compiler talk to the generation backend
through :class:`LLMAdapter.generate`.
"""

from typing import Any, Dict, Optional

from llama_index.core.llms import ChatMessage, MessageRole
from loguru import logger

from ..errors import BackendError, ConfigurationError
from ..nodes_config import config
from .logging_middleware import log_llm_call

SUPPORTED_PROVIDERS = ("openai", "ollama")


class LLMAdapter:
    """
    Adapter for LlamaIndex LLM integrations

    The underlying LLM is created lazily on first use so that a missing
    credential surfaces through :meth:`ensure_credentials` instead of at
    construction time.
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        provider: Optional[str] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        request_timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        additional_kwargs: Optional[Dict[str, Any]] = None
    ):
        """Initialize the adapter with model settings, falling back to the global config"""
        self._model_name = model_name or config.AUDIT_MODEL
        self._provider = (provider or config.AUDIT_MODEL_PROVIDER).lower()
        self._base_url = base_url if base_url is not None else config.AUDIT_MODEL_BASE_URL
        self._api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        self.temperature = temperature if temperature is not None else config.AUDIT_TEMPERATURE
        self.request_timeout = request_timeout if request_timeout is not None else config.REQUEST_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else config.MAX_RETRIES
        self._kwargs = additional_kwargs or {}
        self._llm = None

    @property
    def model_name(self) -> str:
        """Get the model name"""
        return self._model_name

    @property
    def provider(self) -> str:
        """Get the provider name"""
        return self._provider

    @property
    def llm(self):
        """Get the LLM instance, initializing if needed"""
        if self._llm is None:
            self._init_llm()
        return self._llm

    @llm.setter
    def llm(self, value):
        """Set the LLM instance"""
        self._llm = value

    def ensure_credentials(self) -> None:
        """
        Check that the backend can be reached with the configured credentials

        Raises:
            ConfigurationError: If the provider is unknown or its credential is missing
        """
        if self._provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported LLM provider {self._provider!r}; expected one of {', '.join(SUPPORTED_PROVIDERS)}"
            )
        if self._provider == "openai" and not self._api_key and self._llm is None:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

    def _init_llm(self):
        """Initialize the LLM based on provider"""
        self.ensure_credentials()

        if self._provider == "ollama":
            from llama_index.llms.ollama import Ollama
            kwargs = dict(self._kwargs)
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._llm = Ollama(
                model=self._model_name,
                temperature=self.temperature,
                request_timeout=self.request_timeout,
                **kwargs
            )
        else:
            from llama_index.llms.openai import OpenAI
            kwargs = dict(self._kwargs)
            if self._base_url:
                kwargs["api_base"] = self._base_url
            self._llm = OpenAI(
                model=self._model_name,
                temperature=self.temperature,
                api_key=self._api_key,
                timeout=self.request_timeout,
                max_retries=self.max_retries,
                **kwargs
            )
        logger.debug(f"Initialized {self._provider} LLM with model {self._model_name}")

    @log_llm_call
    async def generate(self, system_instruction: str, user_prompt: str, stage_name: Optional[str] = None) -> str:
        """
        Ask the backend one question

        Args:
            system_instruction: Role framing for the model
            user_prompt: The question, including the code under audit
            stage_name: Name of the calling stage, used for logging

        Returns:
            Response text, unmodified

        Raises:
            BackendError: If the backend call fails for any reason
        """
        messages = [
            ChatMessage(role=MessageRole.SYSTEM, content=system_instruction),
            ChatMessage(role=MessageRole.USER, content=user_prompt),
        ]

        llm = self.llm
        try:
            response = await llm.achat(messages)
        except Exception as e:
            detail = str(e)
            if self._api_key:
                detail = detail.replace(self._api_key, "********")
            raise BackendError(
                f"Generation backend failed during {stage_name or 'generation'}: {type(e).__name__}: {detail}",
                stage=stage_name,
            ) from e

        return response.message.content or ""
