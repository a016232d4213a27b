"""Coordinator agent - decides which specialist owns the next turn."""

import re
from typing import Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from career_agent.domain.entities.workflow_state import WORKFLOW_ID, Task, WorkflowState
from career_agent.domain.errors import AgentExecutionError
from career_agent.domain.ports.llm import LLMMessage, LLMPort
from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.prompts import COORDINATOR_MENU, COORDINATOR_PROMPT

log = structlog.get_logger()

CONVERSATION_ROUTE = "conversation"
CAREER_ROUTE = WORKFLOW_ID

CAREER_KEYWORDS = (
    "职业",
    "工作",
    "求职",
    "职场",
    "岗位",
    "职位",
    "就业",
    "职业规划",
    "职业发展",
    "职业咨询",
    "职业指导",
    "职业测评",
    "career",
    "job",
    "work",
    "employment",
    "position",
)

ROUTING_FAILED_REASONING = "任务分配失败，使用默认对话服务"

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class RouteDecision(BaseModel):
    """Coordinator output. reasoning is informational only."""

    model_config = ConfigDict(populate_by_name=True)

    node_id: Literal["conversation", "career-positioning"] = Field(alias="nodeId")
    reasoning: str | None = None


def parse_route(response: str) -> RouteDecision | None:
    """Parse {"nodeId", "reasoning"} from the model reply; None if malformed."""
    text = response.strip()
    if match := _FENCE_RE.match(text):
        text = match.group(1)
    try:
        decision = RouteDecision.model_validate_json(text)
    except ValidationError:
        return None
    if not decision.reasoning:
        decision = decision.model_copy(update={"reasoning": "未提供理由"})
    return decision


def keyword_route(response: str) -> RouteDecision:
    """Fallback when the reply is not valid routing JSON."""
    lowered = response.lower()
    if any(keyword in lowered for keyword in CAREER_KEYWORDS):
        return RouteDecision(node_id=CAREER_ROUTE, reasoning="通过关键词匹配检测到职业相关内容")
    return RouteDecision(
        node_id=CONVERSATION_ROUTE,
        reasoning="未检测到特定领域关键词，使用默认对话服务",
    )


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    log.warning(
        "coordinator_attempt_failed",
        attempt=retry_state.attempt_number,
        error=str(error),
    )


class CoordinatorAgent(AgentNode):
    """Routes a query to "conversation" or "career-positioning"."""

    node_id = "coordinator"
    description = "负责分析用户查询并分配给合适的专业服务"
    system_prompt = COORDINATOR_PROMPT

    def __init__(
        self,
        llm: LLMPort,
        max_attempts: int = 3,
        retry_base_delay: float = 1.0,
    ) -> None:
        super().__init__(llm)
        self._max_attempts = max_attempts
        self._retry_base_delay = retry_base_delay

    def build_messages(self, task: Task) -> list[LLMMessage]:
        """Replace the final user message with the capability menu plus the query."""
        messages = super().build_messages(task)
        messages[-1] = LLMMessage(role="user", content=COORDINATOR_MENU.format(query=task.query))
        return messages

    async def assign_task(
        self,
        query: str,
        workflow_state: WorkflowState | None = None,
    ) -> RouteDecision:
        """Pick the route for this turn. Never raises; defaults to conversation."""
        if workflow_state is not None and workflow_state.is_active:
            return RouteDecision(
                node_id=CAREER_ROUTE,
                reasoning=(
                    f"用户正在进行{workflow_state.workflow_id}工作流，"
                    f"当前阶段：{workflow_state.phase.value}"
                ),
            )

        task = Task(query=query, history=[], workflow_state=workflow_state)
        try:
            response = await self._execute_with_retry(task)
        except AgentExecutionError as e:
            log.warning("route_assignment_failed", error=str(e))
            return RouteDecision(node_id=CONVERSATION_ROUTE, reasoning=ROUTING_FAILED_REASONING)

        decision = parse_route(response)
        if decision is None:
            log.info("route_response_unparsed", response=response[:200])
            decision = keyword_route(response)
        log.info("route_assigned", node_id=decision.node_id)
        return decision

    async def _execute_with_retry(self, task: Task) -> str:
        """Up to max_attempts calls; waits attempt * base delay; only backend failures retry."""
        response = ""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_incrementing(start=self._retry_base_delay, increment=self._retry_base_delay),
            retry=retry_if_exception_type(AgentExecutionError),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                response = await self.execute(task)
        return response
