"""Chat use case - route a turn and stream the chosen agent's output."""

import logging
from collections.abc import AsyncIterator, Callable

from career_agent.application.chat.dto import ChatTurnRequest, ChatTurnResult
from career_agent.application.shared.stream_protocol import (
    collect_stream_content,
    error_stream,
    passthrough_stream,
    wrap_stream,
)
from career_agent.domain.entities.workflow_state import StreamChunk, Task
from career_agent.infrastructure.agents.conversation import ConversationAgent
from career_agent.infrastructure.agents.coordinator import CAREER_ROUTE, CoordinatorAgent
from career_agent.infrastructure.workflow.career_positioning import CareerPositioningWorkflow

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "抱歉，我现在无法处理您的请求，请稍后再试。"
ERROR_ROUTE = "error"


class ChatUseCase:
    """Orchestrates one turn: coordinator routing, then conversation or workflow.

    Agents and workflows are created per turn through the factories; the caller
    persists the content and the terminal chunk's workflow state.
    """

    def __init__(
        self,
        coordinator: CoordinatorAgent,
        conversation_factory: Callable[[], ConversationAgent],
        workflow_factory: Callable[[], CareerPositioningWorkflow],
    ) -> None:
        self._coordinator = coordinator
        self._conversation_factory = conversation_factory
        self._workflow_factory = workflow_factory

    async def execute_stream(
        self,
        request: ChatTurnRequest,
        buffered: bool = False,
    ) -> AsyncIterator[StreamChunk]:
        """Stream the turn. buffered=True guarantees the terminal chunk is the true last one."""
        _, stream = await self._open_turn(request)
        normalize = wrap_stream if buffered else passthrough_stream
        async for chunk in normalize(stream, request.workflow_state):
            yield chunk

    async def execute(self, request: ChatTurnRequest) -> ChatTurnResult:
        """Run the turn to completion and return collected content and final state."""
        node_id, stream = await self._open_turn(request)
        content, state = await collect_stream_content(wrap_stream(stream, request.workflow_state))
        return ChatTurnResult(content=content, workflow_state=state, node_id=node_id)

    async def _open_turn(self, request: ChatTurnRequest) -> tuple[str, AsyncIterator[StreamChunk]]:
        """Pick the route and build the raw chunk stream for it."""
        try:
            decision = await self._coordinator.assign_task(request.query, request.workflow_state)
            logger.debug(
                "Turn routed: session=%s node=%s reasoning=%s",
                request.session_id,
                decision.node_id,
                decision.reasoning,
            )
            if decision.node_id == CAREER_ROUTE:
                workflow = self._workflow_factory()
                return decision.node_id, workflow.execute(
                    request.query,
                    request.history,
                    request.workflow_state,
                )
            agent = self._conversation_factory()
            task = Task(
                query=request.query,
                history=request.history,
                workflow_state=request.workflow_state,
            )
            return decision.node_id, agent.stream_execute(task)
        except Exception:
            logger.exception("Turn setup failed for session=%s", request.session_id)
            return ERROR_ROUTE, error_stream(UNAVAILABLE_MESSAGE)
