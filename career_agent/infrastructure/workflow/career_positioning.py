"""Career-positioning workflow - info collection → assessment → analysis → recommendation.

One call to execute() is one turn. The phase in the incoming WorkflowState picks
the handler; the handler's terminal chunk carries the state for the next turn.
"""

from collections.abc import AsyncIterator, Callable, Sequence

import structlog

from career_agent.domain.entities.workflow_state import (
    WORKFLOW_ID,
    StreamChunk,
    Task,
    WorkflowPhase,
    WorkflowState,
)
from career_agent.domain.ports.llm import LLMMessage, LLMPort
from career_agent.infrastructure.workflow.specialists.analysis import AnalysisAgent
from career_agent.infrastructure.workflow.specialists.assessment import (
    FINISHED_NOTICE,
    TOTAL_QUESTIONS,
    AssessmentAgent,
    is_valid_choice,
    was_asked,
)
from career_agent.infrastructure.workflow.specialists.info_collection import (
    STARTED_NOTICE,
    InfoCollectionAgent,
)
from career_agent.infrastructure.workflow.specialists.recommendation import RecommendationAgent

log = structlog.get_logger()

COMPLETED_NOTICE = "职业定位工作流已完成。如需重新开始，请告诉我。"

PhaseHandler = Callable[[str, list[LLMMessage], WorkflowState], AsyncIterator[StreamChunk]]


def _is_failure(chunk: StreamChunk) -> bool:
    """Terminal chunk with a null state: abnormal end, passed through untouched."""
    return chunk.finished and chunk.workflow_state is None


class CareerPositioningWorkflow:
    """Phase-dispatched state machine over four specialist agents. Build one per turn."""

    workflow_id = WORKFLOW_ID

    def __init__(self, llm: LLMPort) -> None:
        self._info_collection = InfoCollectionAgent(llm)
        self._assessment = AssessmentAgent(llm)
        self._analysis = AnalysisAgent(llm)
        self._recommendation = RecommendationAgent(llm)
        self._handlers: dict[WorkflowPhase, PhaseHandler] = {
            WorkflowPhase.START: self._run_info_collection,
            WorkflowPhase.INFO_COLLECTION: self._run_info_collection,
            WorkflowPhase.ASSESSMENT: self._run_assessment,
            WorkflowPhase.ANALYSIS: self._run_analysis,
            WorkflowPhase.RECOMMENDATION: self._run_recommendation,
            WorkflowPhase.COMPLETED: self._run_completed,
        }

    async def execute(
        self,
        query: str,
        history: Sequence[LLMMessage],
        workflow_state: WorkflowState | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Run one turn. Any handler exception becomes a terminal chunk with a null state."""
        state = workflow_state or WorkflowState.start()
        try:
            handler = self._handlers[state.phase]
            async for chunk in handler(query, list(history), state):
                if chunk.finished and chunk.workflow_state is not None:
                    self._log_transition(state, chunk.workflow_state)
                yield chunk
        except Exception as e:
            log.exception("workflow_failed", phase=state.phase.value, progress=state.progress)
            yield StreamChunk(content=f"工作流执行失败: {e}", finished=True, workflow_state=None)

    @staticmethod
    def _log_transition(before: WorkflowState, after: WorkflowState) -> None:
        if before.phase != after.phase:
            log.info(
                "workflow_phase_transition",
                from_phase=before.phase.value,
                to_phase=after.phase.value,
            )

    async def _run_info_collection(
        self, query: str, history: list[LLMMessage], state: WorkflowState
    ) -> AsyncIterator[StreamChunk]:
        if state.phase == WorkflowPhase.START:
            state = state.advance(WorkflowPhase.INFO_COLLECTION)
            yield StreamChunk(content=STARTED_NOTICE + "\n\n", finished=False, workflow_state=state)

        task = Task(query=query, history=history, workflow_state=state)
        collected: list[str] = []
        async for chunk in self._info_collection.stream_execute(task):
            collected.append(chunk.content)
            if not chunk.finished or _is_failure(chunk):
                yield chunk
                continue
            yield StreamChunk(
                content=chunk.content,
                finished=True,
                workflow_state=self._info_collection.next_state("".join(collected), state),
            )

    async def _run_assessment(
        self, query: str, history: list[LLMMessage], state: WorkflowState
    ) -> AsyncIterator[StreamChunk]:
        progress = state.progress
        # An answer counts only once its question has been shown.
        if is_valid_choice(query) and (progress > 0 or was_asked(history, progress)):
            progress += 1

        if progress >= TOTAL_QUESTIONS:
            yield StreamChunk(
                content=FINISHED_NOTICE,
                finished=True,
                workflow_state=state.advance(WorkflowPhase.ANALYSIS),
            )
            return

        if progress != state.progress:
            state = state.with_progress(progress)
        task = Task(query=query, history=history, workflow_state=state)
        async for chunk in self._assessment.stream_execute(task):
            yield chunk

    async def _run_analysis(
        self, query: str, history: list[LLMMessage], state: WorkflowState
    ) -> AsyncIterator[StreamChunk]:
        task = Task(query=query, history=history, workflow_state=state)
        async for chunk in self._analysis.stream_execute(task):
            if not chunk.finished or _is_failure(chunk):
                yield chunk
                continue
            yield StreamChunk(
                content=chunk.content,
                finished=True,
                workflow_state=state.advance(WorkflowPhase.RECOMMENDATION),
            )

    async def _run_recommendation(
        self, query: str, history: list[LLMMessage], state: WorkflowState
    ) -> AsyncIterator[StreamChunk]:
        task = Task(query=query, history=history, workflow_state=state)
        async for chunk in self._recommendation.stream_execute(task):
            if not chunk.finished or _is_failure(chunk):
                yield chunk
                continue
            if chunk.workflow_state.phase == WorkflowPhase.COMPLETED:
                yield chunk
                continue
            yield StreamChunk(
                content=chunk.content,
                finished=True,
                workflow_state=state.with_progress(state.progress + 1),
            )

    async def _run_completed(
        self, query: str, history: list[LLMMessage], state: WorkflowState
    ) -> AsyncIterator[StreamChunk]:
        yield StreamChunk(content=COMPLETED_NOTICE, finished=True, workflow_state=state)
