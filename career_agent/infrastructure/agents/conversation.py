"""Conversation agent - open-ended chat."""

from collections.abc import AsyncIterator

from career_agent.domain.entities.workflow_state import StreamChunk, Task
from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.prompts import CONVERSATION_PROMPT


class ConversationAgent(AgentNode):
    """General-purpose dialogue."""

    node_id = "conversation"
    description = "用于一般对话、咨询、问答等日常交流"
    system_prompt = CONVERSATION_PROMPT

    def failure_notice(self, error: Exception) -> str:
        return f"对话处理失败: {error}"

    async def stream_execute(self, task: Task) -> AsyncIterator[StreamChunk]:
        """Lead with an empty chunk carrying the state, even if the model sends nothing."""
        yield StreamChunk(content="", finished=False, workflow_state=task.workflow_state)
        async for chunk in super().stream_execute(task):
            yield chunk
