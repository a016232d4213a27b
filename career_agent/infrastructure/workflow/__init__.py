"""Career-positioning workflow."""

from career_agent.infrastructure.workflow.career_positioning import CareerPositioningWorkflow
from career_agent.infrastructure.workflow.history_filter import filter_relevant_history

__all__ = ["CareerPositioningWorkflow", "filter_relevant_history"]
