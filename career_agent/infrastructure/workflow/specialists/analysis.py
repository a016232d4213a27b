"""Analysis specialist - one model pass over the collected information and answers."""

from career_agent.domain.entities.workflow_state import Task, WorkflowPhase
from career_agent.domain.errors import WorkflowError
from career_agent.domain.ports.llm import LLMMessage
from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.prompts import ANALYSIS_INSTRUCTION, ANALYSIS_PROMPT
from career_agent.infrastructure.workflow.history_filter import filter_relevant_history

ANALYSIS_CONTEXT_WINDOW = 5


class AnalysisAgent(AgentNode):
    node_id = "analysis"
    description = "负责分析用户的职业倾向"
    system_prompt = ANALYSIS_PROMPT

    def failure_notice(self, error: Exception) -> str:
        return f"分析阶段执行失败: {error}"

    def build_messages(self, task: Task) -> list[LLMMessage]:
        """Only relevant history is sent; the user's query is replaced by a fixed instruction."""
        if task.workflow_state is None or task.workflow_state.phase != WorkflowPhase.ANALYSIS:
            raise WorkflowError("Invalid workflow state for analysis")
        messages = [LLMMessage(role="system", content=self.system_prompt)]
        messages.extend(
            filter_relevant_history(task.history, fallback_window=ANALYSIS_CONTEXT_WINDOW)
        )
        messages.append(LLMMessage(role="user", content=ANALYSIS_INSTRUCTION))
        return messages
