"""Tests for the producer adapters."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from dagflow.adapters import DagPlannerAdapter, OpenAIAdapter, ProducerError
from dagflow.adapters.openai_adapter import to_langchain_messages
from dagflow.models import ChatMessage, LayoutDirection, WireGraph
from dagflow.prompts import format_entry_kinds
from dagflow.utils.config import Settings

CANDIDATE = WireGraph.model_validate(
    {
        "nodes": [{"id": "trigger_1", "data": {"label": "Start"}}],
        "edges": [],
        "layoutDirection": "LR",
    }
)


@pytest.fixture
def settings():
    """Settings with fast retries and a fallback model."""
    return Settings(
        openai_api_key="test-key",
        planner_model="gpt-4o",
        planner_fallback_models="gpt-4o-mini",
        retry_max_attempts=1,
        retry_base_delay=0.01,
        _env_file=None,
    )


class TestOpenAIAdapter:
    """Tests for the OpenAI adapter."""

    @pytest.fixture
    def adapter(self, settings):
        """Create an adapter instance."""
        with patch("dagflow.adapters.openai_adapter.get_settings", return_value=settings):
            return OpenAIAdapter(model_name="gpt-4o", api_key="test-key", fallback_models=["gpt-4o-mini"])

    def test_adapter_initialization(self, adapter):
        """Test adapter initializes correctly."""
        assert adapter.model_name == "gpt-4o"
        assert adapter.api_key == "test-key"
        assert adapter.get_model_chain() == ["gpt-4o", "gpt-4o-mini"]

    @pytest.mark.asyncio
    async def test_structured_usage_estimated(self, adapter):
        """Test usage is estimated from message and result sizes."""
        client = MagicMock()
        client.with_structured_output.return_value.ainvoke = AsyncMock(return_value=CANDIDATE)

        with patch.object(adapter, "_get_client", return_value=client):
            result, usage = await adapter.generate_structured_with_usage("x" * 40, WireGraph)

        assert result is CANDIDATE
        assert usage.model == "gpt-4o"
        assert usage.input_tokens == 10
        assert usage.output_tokens == len(str(CANDIDATE)) // 4

    @pytest.mark.asyncio
    async def test_structured_falls_back(self, adapter):
        """Test the next model is tried when the first one fails."""
        failing = MagicMock()
        failing.with_structured_output.return_value.ainvoke = AsyncMock(side_effect=RuntimeError("rate limited"))
        working = MagicMock()
        working.with_structured_output.return_value.ainvoke = AsyncMock(return_value=CANDIDATE)

        with patch.object(adapter, "_get_client", side_effect=[failing, working]):
            result, usage = await adapter.generate_structured_with_usage("plan", WireGraph)

        assert result is CANDIDATE
        assert usage.model == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_all_models_fail(self, adapter):
        """Test ProducerError once every model has failed."""
        failing = MagicMock()
        failing.with_structured_output.return_value.ainvoke = AsyncMock(side_effect=RuntimeError("down"))

        with patch.object(adapter, "_get_client", return_value=failing):
            with pytest.raises(ProducerError) as exc_info:
                await adapter.generate_structured("plan", WireGraph)

        assert exc_info.value.code == "producer-failed"


class TestMessages:
    """Tests for building the model's message list."""

    def test_order_and_roles(self):
        """Test system prompt, history and prompt are sent in order."""
        history = [
            ChatMessage(role="user", content="Email me new orders"),
            ChatMessage(role="assistant", content="Done"),
        ]
        messages = to_langchain_messages("And log them", "Be brief", history)

        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert messages[-1].content == "And log them"

    def test_empty_prompt_skipped(self):
        """Test an empty prompt adds no message."""
        messages = to_langchain_messages("", None, [ChatMessage(content="hi")])
        assert len(messages) == 1


class TestDagPlannerAdapter:
    """Tests for the DAG planner."""

    @pytest.fixture
    def planner(self, settings):
        """Create a planner from settings."""
        with patch("dagflow.adapters.openai_adapter.get_settings", return_value=settings):
            return DagPlannerAdapter()

    def test_uses_planner_settings(self, planner):
        """Test the planner model and fallbacks come from settings."""
        assert planner.model_name == "gpt-4o"
        assert planner.fallback_models == ["gpt-4o-mini"]
        assert planner.temperature == 0.0

    def test_system_prompts_list_catalog(self, catalog):
        """Test the prompts carry the catalog and entry-kind rule."""
        prompts = DagPlannerAdapter.build_system_prompts(catalog, LayoutDirection.TOP_TO_BOTTOM)

        assert all(p.role == "system" for p in prompts)
        assert '"trigger"' in prompts[1].content
        assert '"name": "email"' in prompts[1].content
        assert '"bottom"' in prompts[0].content
        assert '"TB"' in prompts[0].content

    @pytest.mark.asyncio
    async def test_propose_graph(self, planner, catalog):
        """Test the conversation is sent after the system prompts."""
        messages = [ChatMessage(role="user", content="Email me new orders")]
        with patch.object(planner, "generate_structured", AsyncMock(return_value=CANDIDATE)) as mock_generate:
            candidate = await planner.propose_graph(messages, catalog)

        assert candidate is CANDIDATE
        history = mock_generate.await_args.kwargs["history"]
        assert [m.role for m in history] == ["system", "system", "user"]
        assert mock_generate.await_args.kwargs["response_model"] is WireGraph

    @pytest.mark.asyncio
    async def test_propose_graph_requires_messages(self, planner, catalog):
        """Test an empty conversation is refused."""
        with pytest.raises(ProducerError):
            await planner.propose_graph([], catalog)


class TestFormatEntryKinds:
    """Tests for the entry-kind listing."""

    def test_or_joined(self):
        """Test kinds are quoted, sorted and or-joined."""
        assert format_entry_kinds({"webhook", "trigger", "scheduler"}) == '"scheduler", "trigger", or "webhook"'

    def test_single_kind(self):
        """Test a single kind is just quoted."""
        assert format_entry_kinds({"trigger"}) == '"trigger"'
