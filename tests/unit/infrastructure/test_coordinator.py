"""Tests for CoordinatorAgent routing."""

import pytest

from career_agent.domain.entities.workflow_state import WorkflowPhase, WorkflowState
from career_agent.domain.errors import LLMError
from career_agent.infrastructure.agents.coordinator import (
    CAREER_ROUTE,
    CONVERSATION_ROUTE,
    ROUTING_FAILED_REASONING,
    CoordinatorAgent,
    keyword_route,
    parse_route,
)


@pytest.fixture
def coordinator_for(make_llm):
    def build(**llm_kwargs):
        llm = make_llm(**llm_kwargs)
        return CoordinatorAgent(llm, max_attempts=3, retry_base_delay=0), llm

    return build


class TestParseRoute:
    def test_plain_json(self):
        decision = parse_route('{"nodeId": "career-positioning", "reasoning": "职业相关"}')
        assert decision.node_id == CAREER_ROUTE
        assert decision.reasoning == "职业相关"

    def test_fenced_json(self):
        decision = parse_route('```json\n{"nodeId": "conversation", "reasoning": "闲聊"}\n```')
        assert decision.node_id == CONVERSATION_ROUTE

    def test_missing_reasoning_gets_placeholder(self):
        decision = parse_route('{"nodeId": "conversation"}')
        assert decision.reasoning

    def test_unknown_node_rejected(self):
        assert parse_route('{"nodeId": "weather", "reasoning": "x"}') is None

    def test_not_json(self):
        assert parse_route("I think conversation") is None


class TestKeywordRoute:
    def test_chinese_keyword(self):
        assert keyword_route("这是关于职业规划的问题").node_id == CAREER_ROUTE

    def test_english_keyword_case_insensitive(self):
        assert keyword_route("Looks like a JOB question").node_id == CAREER_ROUTE

    def test_no_keyword(self):
        assert keyword_route("今天天气不错").node_id == CONVERSATION_ROUTE


class TestAssignTask:
    """Tests for CoordinatorAgent.assign_task."""

    @pytest.mark.asyncio
    async def test_active_workflow_short_circuits(self, coordinator_for):
        coordinator, llm = coordinator_for(replies=['{"nodeId": "conversation"}'])
        state = WorkflowState(phase=WorkflowPhase.ASSESSMENT, progress=3)

        first = await coordinator.assign_task("B", state)
        second = await coordinator.assign_task("B", state)

        assert first.node_id == CAREER_ROUTE
        assert second.node_id == CAREER_ROUTE
        assert "assessment" in first.reasoning
        assert llm.complete_calls == []

    @pytest.mark.asyncio
    async def test_completed_workflow_is_routed_normally(self, coordinator_for):
        coordinator, llm = coordinator_for(replies=['{"nodeId": "conversation", "reasoning": "闲聊"}'])
        decision = await coordinator.assign_task("你好", WorkflowState(phase=WorkflowPhase.COMPLETED))
        assert decision.node_id == CONVERSATION_ROUTE
        assert len(llm.complete_calls) == 1

    @pytest.mark.asyncio
    async def test_structured_reply(self, coordinator_for):
        coordinator, llm = coordinator_for(
            replies=['{"nodeId": "career-positioning", "reasoning": "用户想做职业规划"}']
        )
        decision = await coordinator.assign_task("我想了解职业规划")

        assert decision.node_id == CAREER_ROUTE
        messages = llm.complete_calls[0]
        assert messages[0].role == "system"
        assert messages[-1].role == "user"
        assert "career-positioning" in messages[-1].content
        assert "我想了解职业规划" in messages[-1].content

    @pytest.mark.asyncio
    async def test_malformed_reply_uses_keywords_without_retry(self, coordinator_for):
        coordinator, llm = coordinator_for(replies=["这个用户需要职业规划方面的帮助"])
        decision = await coordinator.assign_task("我想了解职业规划")

        assert decision.node_id == CAREER_ROUTE
        assert len(llm.complete_calls) == 1

    @pytest.mark.asyncio
    async def test_malformed_reply_defaults_to_conversation(self, coordinator_for):
        coordinator, llm = coordinator_for(replies=["hmm"])
        decision = await coordinator.assign_task("你好")
        assert decision.node_id == CONVERSATION_ROUTE
        assert len(llm.complete_calls) == 1

    @pytest.mark.asyncio
    async def test_backend_failure_retries_then_defaults(self, coordinator_for):
        coordinator, llm = coordinator_for(error=LLMError("timeout"))
        decision = await coordinator.assign_task("我想找工作")

        assert decision.node_id == CONVERSATION_ROUTE
        assert decision.reasoning == ROUTING_FAILED_REASONING
        assert len(llm.complete_calls) == 3

    @pytest.mark.asyncio
    async def test_recovers_on_second_attempt(self, make_llm):
        llm = make_llm(replies=['{"nodeId": "career-positioning", "reasoning": "求职"}'])
        failures = iter([LLMError("flaky")])
        original = llm.complete

        async def flaky_complete(messages):
            error = next(failures, None)
            if error:
                llm.complete_calls.append(list(messages))
                raise error
            return await original(messages)

        llm.complete = flaky_complete
        coordinator = CoordinatorAgent(llm, max_attempts=3, retry_base_delay=0)

        decision = await coordinator.assign_task("我想找工作")
        assert decision.node_id == CAREER_ROUTE
        assert len(llm.complete_calls) == 2
