"""Info-collection specialist - gathers background through model-driven dialogue."""

from career_agent.domain.entities.workflow_state import WorkflowPhase, WorkflowState
from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.prompts import INFO_COLLECTION_PROMPT

# Phrase the model is told to emit once background gathering is done.
# TODO: replace with a structured completion signal once the backend supports tool calls.
COMPLETION_SENTINEL = "信息收集完成"
STARTED_NOTICE = "开始信息收集"


class InfoCollectionAgent(AgentNode):
    """Uses the generic streaming contract; the workflow inspects its output."""

    node_id = "info-collection"
    description = "负责收集用户的职业相关信息"
    system_prompt = INFO_COLLECTION_PROMPT

    @staticmethod
    def is_complete(collected: str) -> bool:
        return COMPLETION_SENTINEL in collected

    def next_state(self, collected: str, state: WorkflowState) -> WorkflowState:
        """Assessment once the sentinel was streamed, otherwise unchanged."""
        if self.is_complete(collected):
            return state.advance(WorkflowPhase.ASSESSMENT)
        return state
