"""Domain entities."""

from career_agent.domain.entities.workflow_state import (
    WORKFLOW_ID,
    StreamChunk,
    Task,
    WorkflowPhase,
    WorkflowState,
)

__all__ = ["WORKFLOW_ID", "StreamChunk", "Task", "WorkflowPhase", "WorkflowState"]
