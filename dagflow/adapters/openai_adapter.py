"""OpenAI adapter and the DAG planner built on it."""

import json
from typing import Optional, Sequence, Type, TypeVar

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from dagflow.adapters.base import BaseAdapter, ProducerError
from dagflow.models import Catalog, ChatMessage, LayoutDirection, WireGraph
from dagflow.prompts.planner import CATALOG_PROMPT, PLANNER_SYSTEM_PROMPT, format_entry_kinds
from dagflow.utils.config import get_settings
from dagflow.utils.metrics import TokenUsage
from dagflow.utils.resilience import MaxRetriesExceededError, RetryConfig, with_retry
from dagflow.validation.sanitizer import ports_for

T = TypeVar("T", bound=BaseModel)

_ROLE_MESSAGES = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


def to_langchain_messages(
    prompt: Optional[str],
    system_prompt: Optional[str] = None,
    history: Optional[Sequence[ChatMessage]] = None,
) -> list[BaseMessage]:
    """Build the message list: system prompt, history, then the prompt."""
    messages: list[BaseMessage] = []
    if system_prompt:
        messages.append(SystemMessage(content=system_prompt))
    for turn in history or []:
        messages.append(_ROLE_MESSAGES[turn.role](content=turn.content))
    if prompt:
        messages.append(HumanMessage(content=prompt))
    return messages


class OpenAIAdapter(BaseAdapter):
    """Adapter for OpenAI chat models (GPT-4o, etc.)."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        fallback_models: Optional[list[str]] = None,
        base_url: Optional[str] = None,
    ):
        """Initialize the OpenAI adapter.

        Args:
            model_name: Model name (defaults to settings).
            api_key: API key (defaults to settings).
            fallback_models: List of fallback model names.
            base_url: Alternative API base URL (defaults to settings).
        """
        settings = get_settings()

        retry_config = RetryConfig(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
        )

        super().__init__(
            model_name=model_name or settings.planner_model,
            api_key=api_key or settings.openai_api_key,
            fallback_models=fallback_models,
            retry_config=retry_config,
        )
        self.base_url = base_url or settings.openai_api_base
        self._clients: dict[str, ChatOpenAI] = {}

    def _get_client(self, model: str, temperature: float, max_tokens: int) -> ChatOpenAI:
        """Get or create a ChatOpenAI client for a model."""
        key = f"{model}_{temperature}_{max_tokens}"
        if key not in self._clients:
            self._clients[key] = ChatOpenAI(
                model=model,
                api_key=self.api_key,
                base_url=self.base_url,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        return self._clients[key]

    async def _call_with_fallback(self, func, *args, **kwargs):
        """Call ``func(model, ...)`` for each model of the chain until one succeeds."""
        models = self.get_model_chain()
        last_error: Optional[Exception] = None

        for i, model in enumerate(models):
            if i > 0:
                self._log_fallback(models[i - 1], model, str(last_error))

            try:
                return await func(model, *args, **kwargs), model
            except MaxRetriesExceededError as e:
                last_error = e.last_exception or e

        raise ProducerError(f"All models failed: {models}: {last_error}", model=models[-1])

    async def generate_structured_with_usage(
        self,
        prompt: str,
        response_model: Type[T],
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        history: Optional[Sequence[ChatMessage]] = None,
    ) -> tuple[T, TokenUsage]:
        """Generate a structured response with usage tracking.

        Args:
            prompt: The user prompt (may be empty when ``history`` carries it).
            response_model: Pydantic model class for the response.
            system_prompt: Optional system prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            history: Earlier conversation turns.

        Returns:
            Tuple of (response_model instance, TokenUsage).
        """
        self._log_request(prompt, system_prompt)
        messages = to_langchain_messages(prompt, system_prompt, history)

        @with_retry(self.retry_config)
        async def _generate_structured(model: str) -> tuple:
            client = self._get_client(model, temperature, max_tokens)
            structured_client = client.with_structured_output(response_model)
            result = await structured_client.ainvoke(messages)

            # Structured output does not always report usage
            prompt_len = sum(len(str(m.content)) for m in messages)
            usage = TokenUsage(
                model=model,
                input_tokens=prompt_len // 4,
                output_tokens=len(str(result)) // 4,
            )
            return result, usage

        result_tuple, model_used = await self._call_with_fallback(_generate_structured)
        result, usage = result_tuple
        usage.model = model_used
        self._log_response(result, usage)
        return result, usage


class DagPlannerAdapter(OpenAIAdapter):
    """Adapter that asks the planner model for a candidate DAG."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize the planner adapter from settings."""
        settings = get_settings()
        super().__init__(
            model_name=settings.planner_model,
            api_key=api_key,
            fallback_models=settings.planner_fallback_chain(),
        )
        self.temperature = settings.planner_temperature

    @staticmethod
    def build_system_prompts(
        catalog: Catalog,
        direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    ) -> list[ChatMessage]:
        """Task-analysis instructions followed by the catalog listing."""
        leading, trailing = ports_for(direction)
        instructions = PLANNER_SYSTEM_PROMPT.format(
            leading=leading.value,
            trailing=trailing.value,
            direction=direction.value,
        )
        catalog_text = CATALOG_PROMPT.format(
            entry_kinds=format_entry_kinds(catalog.entry_kinds),
            catalog=json.dumps(catalog.records(), indent=2),
        )
        return [
            ChatMessage(role="system", content=instructions),
            ChatMessage(role="system", content=catalog_text),
        ]

    async def propose_graph(
        self,
        messages: Sequence[ChatMessage],
        catalog: Catalog,
        direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT,
    ) -> WireGraph:
        """Ask the planner for a candidate graph.

        Args:
            messages: The user's conversation, oldest first.
            catalog: Loaded catalog, listed in the prompt.
            direction: Direction the planner is asked to use.

        Returns:
            The candidate in wire form. It is untrusted and still has to go
            through the pipeline.

        Raises:
            ProducerError: If no model of the chain returns a graph.
        """
        if not messages:
            raise ProducerError("No messages to plan from")

        history = self.build_system_prompts(catalog, direction) + list(messages)
        candidate = await self.generate_structured(
            prompt="",
            response_model=WireGraph,
            temperature=self.temperature,
            history=history,
        )
        if candidate is None:
            raise ProducerError("Planner returned no graph", model=self.model_name)

        self.logger.info(
            f"Planner proposed {len(candidate.nodes)} nodes / {len(candidate.edges)} edges"
        )
        return candidate
