"""Tests for ChatUseCase turn orchestration."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from career_agent.application.chat.dto import ChatTurnRequest
from career_agent.application.chat.use_case import UNAVAILABLE_MESSAGE, ChatUseCase
from career_agent.domain.entities.workflow_state import WorkflowPhase, WorkflowState
from career_agent.infrastructure.agents.conversation import ConversationAgent
from career_agent.infrastructure.agents.coordinator import CoordinatorAgent, RouteDecision
from career_agent.infrastructure.workflow.career_positioning import CareerPositioningWorkflow


def _coordinator(node_id: str) -> MagicMock:
    coordinator = MagicMock()
    coordinator.assign_task = AsyncMock(return_value=RouteDecision(node_id=node_id, reasoning="test"))
    return coordinator


@pytest.fixture
def use_case_for(make_llm):
    def build(node_id: str, **llm_kwargs):
        llm = make_llm(**llm_kwargs)
        use_case = ChatUseCase(
            coordinator=_coordinator(node_id),
            conversation_factory=lambda: ConversationAgent(llm),
            workflow_factory=lambda: CareerPositioningWorkflow(llm),
        )
        return use_case, llm

    return build


class TestChatTurnRequest:
    def test_accepts_wire_names(self):
        request = ChatTurnRequest.model_validate(
            {
                "query": "B",
                "sessionId": "s1",
                "history": [{"role": "assistant", "content": "测评问题 1/15"}],
                "workflowState": {"workflowId": "career-positioning", "phase": "assessment", "progress": 0},
            }
        )
        assert request.session_id == "s1"
        assert request.workflow_state.phase == WorkflowPhase.ASSESSMENT

    def test_empty_query_rejected(self):
        with pytest.raises(ValueError):
            ChatTurnRequest(query="")


class TestChatUseCase:
    """Tests for ChatUseCase."""

    @pytest.mark.asyncio
    async def test_conversation_turn(self, use_case_for):
        use_case, _ = use_case_for("conversation", fragments=["你好", "！"])
        result = await use_case.execute(ChatTurnRequest(query="你好"))
        assert result.content == "你好！"
        assert result.node_id == "conversation"
        assert result.workflow_state is None

    @pytest.mark.asyncio
    async def test_career_turn_starts_workflow(self, use_case_for):
        use_case, _ = use_case_for("career-positioning", fragments=["请介绍您的教育背景"])
        result = await use_case.execute(ChatTurnRequest(query="我想了解职业规划"))
        assert result.node_id == "career-positioning"
        assert result.workflow_state == WorkflowState(phase=WorkflowPhase.INFO_COLLECTION, progress=0)
        assert "请介绍您的教育背景" in result.content

    @pytest.mark.asyncio
    async def test_stream_has_single_terminal_chunk(self, use_case_for):
        use_case, _ = use_case_for("career-positioning")
        state = WorkflowState(phase=WorkflowPhase.ASSESSMENT, progress=3)
        chunks = [
            c async for c in use_case.execute_stream(ChatTurnRequest(query="B", workflow_state=state))
        ]
        assert sum(c.finished for c in chunks) == 1
        assert chunks[-1].workflow_state == WorkflowState(phase=WorkflowPhase.ASSESSMENT, progress=4)

    @pytest.mark.asyncio
    async def test_buffered_stream(self, use_case_for):
        use_case, _ = use_case_for("conversation", fragments=["a", "b"])
        chunks = [c async for c in use_case.execute_stream(ChatTurnRequest(query="hi"), buffered=True)]
        assert chunks[-1].finished
        assert sum(c.finished for c in chunks) == 1

    @pytest.mark.asyncio
    async def test_routing_failure_returns_apology(self, make_llm):
        coordinator = MagicMock()
        coordinator.assign_task = AsyncMock(side_effect=RuntimeError("unexpected"))
        llm = make_llm()
        use_case = ChatUseCase(
            coordinator=coordinator,
            conversation_factory=lambda: ConversationAgent(llm),
            workflow_factory=lambda: CareerPositioningWorkflow(llm),
        )
        result = await use_case.execute(ChatTurnRequest(query="你好"))
        assert result.content == UNAVAILABLE_MESSAGE
        assert result.workflow_state is None
        assert result.node_id == "error"

    @pytest.mark.asyncio
    async def test_active_workflow_routes_through_real_coordinator(self, make_llm):
        llm = make_llm()
        use_case = ChatUseCase(
            coordinator=CoordinatorAgent(llm, retry_base_delay=0),
            conversation_factory=lambda: ConversationAgent(llm),
            workflow_factory=lambda: CareerPositioningWorkflow(llm),
        )
        state = WorkflowState(phase=WorkflowPhase.ASSESSMENT, progress=14)
        result = await use_case.execute(ChatTurnRequest(query="D", workflow_state=state))
        assert result.workflow_state == WorkflowState(phase=WorkflowPhase.ANALYSIS, progress=0)
        assert llm.complete_calls == []
