"""Chat turn DTOs."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from career_agent.domain.entities.workflow_state import WorkflowState
from career_agent.domain.ports.llm import LLMMessage


class ChatTurnRequest(BaseModel):
    """One user turn.

    Contract: history = previous turns only, supplied by the caller's own storage.
    workflow_state is the terminal state returned by the previous turn, if any.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    query: str = Field(..., min_length=1, max_length=100_000)
    session_id: str | None = Field(None, max_length=100)  # Opaque history scope; not used for lookup
    history: list[LLMMessage] = Field(default_factory=list)
    workflow_state: WorkflowState | None = None


class ChatTurnResult(BaseModel):
    """Collected turn: full content plus the state to persist for the next turn."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    content: str
    workflow_state: WorkflowState | None = None
    node_id: str
