"""Base adapter for producer models."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from dagflow.models import ChatMessage
from dagflow.utils.logger import get_logger
from dagflow.utils.metrics import TokenUsage
from dagflow.utils.resilience import RetryConfig

T = TypeVar("T", bound=BaseModel)


class ProducerError(Exception):
    """Raised when the producer cannot return a candidate graph."""

    code = "producer-failed"

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


class BaseAdapter(ABC):
    """Abstract base class for producer model adapters."""

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str] = None,
        fallback_models: Optional[list[str]] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """Initialize the adapter.

        Args:
            model_name: Name of the primary model to use.
            api_key: API key for authentication (if not using env var).
            fallback_models: List of fallback model names to try on failure.
            retry_config: Configuration for retry behavior.
        """
        self.model_name = model_name
        self.api_key = api_key
        self.fallback_models = fallback_models or []
        self.retry_config = retry_config
        self.logger = get_logger()

    @abstractmethod
    async def generate_structured_with_usage(
        self,
        prompt: str,
        response_model: Type[T],
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        history: Optional[Sequence[ChatMessage]] = None,
    ) -> tuple[T, TokenUsage]:
        """Generate a response conforming to a Pydantic model, with usage.

        Returns:
            Tuple of (response_model instance, TokenUsage).
        """

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[T],
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        history: Optional[Sequence[ChatMessage]] = None,
    ) -> T:
        """Generate a structured response that conforms to a Pydantic model."""
        result, _ = await self.generate_structured_with_usage(
            prompt,
            response_model,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            history=history,
        )
        return result

    def get_model_chain(self) -> list[str]:
        """Get the full model chain including fallbacks.

        Returns:
            List of model names to try in order.
        """
        return [self.model_name] + self.fallback_models

    def _log_request(self, prompt: str, system_prompt: Optional[str] = None) -> None:
        """Log an API request."""
        self.logger.debug(
            f"[{self.__class__.__name__}] Request to {self.model_name}: "
            f"prompt_len={len(prompt)}, system_len={len(system_prompt or '')}"
        )

    def _log_response(
        self,
        response: Any,
        usage: Optional[TokenUsage] = None,
    ) -> None:
        """Log an API response with usage metrics."""
        response_len = len(str(response)) if response else 0
        usage_info = ""
        if usage:
            usage_info = (
                f", tokens_in={usage.input_tokens}, "
                f"tokens_out={usage.output_tokens}"
            )
        self.logger.debug(
            f"[{self.__class__.__name__}] Response from {usage.model if usage else self.model_name}: "
            f"response_len={response_len}{usage_info}"
        )

    def _log_fallback(self, from_model: str, to_model: str, reason: str) -> None:
        """Log a fallback to another model."""
        self.logger.warning(
            f"[{self.__class__.__name__}] Falling back from {from_model} to "
            f"{to_model}: {reason}"
        )
