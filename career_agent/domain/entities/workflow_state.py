"""Workflow state, task and stream chunk schemas.

WorkflowState is plain data: each turn receives it by value and returns the
next one in its terminal StreamChunk. Nothing here is shared or mutated.
"""

import json
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from career_agent.domain.errors import WorkflowError
from career_agent.domain.ports.llm import LLMMessage

WORKFLOW_ID = "career-positioning"


class WorkflowPhase(str, Enum):
    """Phases of the career-positioning workflow, in order."""

    START = "start"
    INFO_COLLECTION = "info_collection"
    ASSESSMENT = "assessment"
    ANALYSIS = "analysis"
    RECOMMENDATION = "recommendation"
    COMPLETED = "completed"

    @property
    def order(self) -> int:
        return _PHASE_ORDER.index(self)


_PHASE_ORDER = list(WorkflowPhase)


class WorkflowState(BaseModel):
    """Serializable {workflowId, phase, progress} handed back by the caller each turn."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    workflow_id: Literal["career-positioning"] = WORKFLOW_ID
    phase: WorkflowPhase = WorkflowPhase.START
    progress: int = Field(0, ge=0)  # Phase-local counter, reset on every transition

    @classmethod
    def start(cls) -> "WorkflowState":
        """State of a workflow that has not run yet."""
        return cls(phase=WorkflowPhase.START, progress=0)

    @property
    def is_active(self) -> bool:
        """True while the workflow still owns the conversation."""
        return self.workflow_id == WORKFLOW_ID and self.phase != WorkflowPhase.COMPLETED

    def advance(self, phase: WorkflowPhase) -> "WorkflowState":
        """Move forward to *phase*, resetting progress. Backward moves are rejected."""
        if phase.order <= self.phase.order:
            raise WorkflowError(f"无法从阶段 {self.phase.value} 转换到 {phase.value}")
        return self.model_copy(update={"phase": phase, "progress": 0})

    def with_progress(self, progress: int) -> "WorkflowState":
        """Same phase, new progress counter."""
        if progress < 0:
            raise WorkflowError(f"进度不能为负数: {progress}")
        return self.model_copy(update={"progress": progress})

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Task(BaseModel):
    """One invocation of an agent node. Built per turn, never persisted."""

    query: str
    history: list[LLMMessage] = Field(default_factory=list)
    workflow_state: WorkflowState | None = None


class StreamChunk(BaseModel):
    """One unit of the streaming protocol. Exactly one chunk per turn is terminal.

    Whether workflow_state was given explicitly (even as None) is tracked, so the
    stream wrappers only fill in a default where a producer said nothing.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    content: str = ""
    finished: bool = False
    workflow_state: WorkflowState | None = None

    @property
    def has_state(self) -> bool:
        return "workflow_state" in self.model_fields_set

    def to_wire(self) -> dict[str, Any]:
        """JSON object sent to the client (workflowState is null when absent)."""
        return {
            "content": self.content,
            "finished": self.finished,
            "workflowState": self.workflow_state.to_wire() if self.workflow_state else None,
        }

    def to_wire_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False)
