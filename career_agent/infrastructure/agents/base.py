"""Agent node - a role with a fixed system prompt on top of a model client."""

from collections.abc import AsyncIterator

import structlog

from career_agent.domain.entities.workflow_state import StreamChunk, Task
from career_agent.domain.errors import AgentExecutionError
from career_agent.domain.ports.llm import LLMMessage, LLMPort

log = structlog.get_logger()


class AgentNode:
    """Answers a task in one shot or as a stream of StreamChunk.

    Subclasses set node_id/description/system_prompt and may override
    build_messages (extra context) or stream_execute (non-model turns).
    Nodes keep no per-turn state; construct one per turn.
    """

    node_id: str = "agent"
    description: str = ""
    system_prompt: str = ""

    def __init__(self, llm: LLMPort) -> None:
        self._llm = llm

    def build_messages(self, task: Task) -> list[LLMMessage]:
        """System prompt, then history, then the query as the final user message."""
        messages = [LLMMessage(role="system", content=self.system_prompt)]
        messages.extend(task.history)
        messages.append(LLMMessage(role="user", content=task.query))
        return messages

    def failure_notice(self, error: Exception) -> str:
        """Human-readable content of the terminal chunk emitted on failure."""
        return f"Agent {self.node_id} 执行失败: {error}"

    async def execute(self, task: Task) -> str:
        """One-shot completion. Backend failures surface as AgentExecutionError."""
        try:
            messages = self.build_messages(task)
            return await self._llm.complete(messages)
        except Exception as e:
            raise AgentExecutionError(self.node_id, str(e)) from e

    async def stream_execute(self, task: Task) -> AsyncIterator[StreamChunk]:
        """Stream fragments with the task's state, then an empty terminal chunk.

        Failures never escape: they become one terminal chunk with a null state.
        """
        try:
            messages = self.build_messages(task)
            async for fragment in self._llm.stream_complete(messages):
                yield StreamChunk(
                    content=fragment,
                    finished=False,
                    workflow_state=task.workflow_state,
                )
            yield StreamChunk(content="", finished=True, workflow_state=task.workflow_state)
        except Exception as e:
            log.warning("agent_stream_failed", node_id=self.node_id, error=str(e))
            yield StreamChunk(content=self.failure_notice(e), finished=True, workflow_state=None)
