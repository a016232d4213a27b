"""Recommendation specialist - one job recommendation per turn until the user likes one."""

import json
import re
from collections.abc import AsyncIterator
from enum import Enum
from typing import Annotated

import structlog
from pydantic import BaseModel, StringConstraints, ValidationError

from career_agent.domain.entities.workflow_state import StreamChunk, Task, WorkflowPhase
from career_agent.domain.errors import WorkflowError
from career_agent.domain.ports.llm import LLMMessage
from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.prompts import RECOMMENDATION_PROMPT
from career_agent.infrastructure.workflow.history_filter import filter_relevant_history

log = structlog.get_logger()

RECOMMENDATION_CONTEXT_WINDOW = 10

# "不喜欢" contains "喜欢": negatives are checked first. English words match whole words only.
NEGATIVE_MARKERS = ("不喜欢",)
POSITIVE_MARKERS = ("喜欢",)
_NEGATIVE_WORD_RE = re.compile(r"\b(?:dislike|don't like|do not like)\b")
_POSITIVE_WORD_RE = re.compile(r"\blike\b")

COMPLETION_MESSAGE = "很高兴您喜欢这个推荐！职业定位工作流已完成。祝您求职顺利！"
DISLIKE_EARLY_MESSAGE = "了解，让我为您推荐其他职位。"
DISLIKE_LATE_MESSAGE = "让我继续为您推荐其他合适的职位。"
FEEDBACK_REMINDER = '请告诉我您是否喜欢这个推荐（回复"喜欢"或"不喜欢"）。'
MIN_RECOMMENDATIONS = 5

_DECODER = json.JSONDecoder()

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Feedback(str, Enum):
    NEGATIVE = "negative"
    POSITIVE = "positive"
    NONE = "none"


class JobRecommendation(BaseModel):
    job_title: NonEmpty
    job_description: NonEmpty

    def to_json(self) -> str:
        return json.dumps(self.model_dump(), ensure_ascii=False, separators=(",", ":"))


FALLBACK_RECOMMENDATIONS: tuple[JobRecommendation, ...] = (
    JobRecommendation(job_title="产品经理", job_description="负责产品规划和需求分析，协调各部门推进产品开发。"),
    JobRecommendation(job_title="数据分析师", job_description="分析业务数据，提供数据洞察和决策支持。"),
    JobRecommendation(job_title="市场营销专员", job_description="制定营销策略，执行推广活动，提升品牌知名度。"),
    JobRecommendation(job_title="人力资源专员", job_description="负责招聘、培训和员工关系管理工作。"),
    JobRecommendation(job_title="项目经理", job_description="管理项目进度，协调资源，确保项目按时交付。"),
    JobRecommendation(job_title="客户服务专员", job_description="处理客户咨询和投诉，维护客户关系。"),
    JobRecommendation(job_title="财务分析师", job_description="进行财务分析和预算管理，支持业务决策。"),
    JobRecommendation(job_title="运营专员", job_description="优化业务流程，提升运营效率和用户体验。"),
)


def classify_feedback(query: str) -> Feedback:
    text = query.strip().lower()
    if any(marker in text for marker in NEGATIVE_MARKERS) or _NEGATIVE_WORD_RE.search(text):
        return Feedback.NEGATIVE
    if any(marker in text for marker in POSITIVE_MARKERS) or _POSITIVE_WORD_RE.search(text):
        return Feedback.POSITIVE
    return Feedback.NONE


def feedback_notice(feedback: Feedback, progress: int) -> str:
    """Text shown before a new recommendation; empty on first entry to the phase."""
    if feedback is Feedback.NEGATIVE:
        return DISLIKE_EARLY_MESSAGE if progress < MIN_RECOMMENDATIONS else DISLIKE_LATE_MESSAGE
    if progress == 0:
        return ""
    return FEEDBACK_REMINDER


def extract_recommendation(content: str) -> JobRecommendation | None:
    """First JSON object in *content* with non-empty job_title and job_description."""
    start = content.find("{")
    while start != -1:
        try:
            obj, _ = _DECODER.raw_decode(content, start)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            try:
                return JobRecommendation.model_validate(obj)
            except ValidationError:
                pass
        start = content.find("{", start + 1)
    return None


def fallback_recommendation(progress: int) -> JobRecommendation:
    return FALLBACK_RECOMMENDATIONS[progress % len(FALLBACK_RECOMMENDATIONS)]


def build_instruction(progress: int) -> str:
    parts = ["请基于以上信息收集、测评和分析结果，为用户推荐一个合适的职位。\n\n"]
    if progress > 0:
        parts.append(f"这是第{progress + 1}个推荐，请推荐与之前不同的职位，不要重复已经推荐过的岗位。\n\n")
    parts.append("请严格按照以下JSON格式输出，不要包含其他内容：\n")
    parts.append('{"job_title": "具体岗位名称", "job_description": "1-2句话的岗位简介"}\n\n')
    parts.append("要求：\n")
    parts.append("1. job_title必须是具体明确的岗位名称\n")
    parts.append("2. job_description必须是1-2句话的简洁介绍\n")
    parts.append("3. 推荐要基于用户的实际情况和能力\n")
    parts.append("4. 只输出JSON格式，不要添加其他解释文字")
    return "".join(parts)


class RecommendationAgent(AgentNode):
    """Handles like/dislike feedback, then streams and validates a recommendation."""

    node_id = "recommendation"
    description = "负责推荐合适的职位"
    system_prompt = RECOMMENDATION_PROMPT

    def failure_notice(self, error: Exception) -> str:
        return f"推荐阶段执行失败: {error}"

    def build_messages(self, task: Task) -> list[LLMMessage]:
        progress = task.workflow_state.progress if task.workflow_state else 0
        messages = [LLMMessage(role="system", content=self.system_prompt)]
        messages.extend(
            filter_relevant_history(
                task.history,
                include_analysis=True,
                fallback_window=RECOMMENDATION_CONTEXT_WINDOW,
            )
        )
        messages.append(LLMMessage(role="user", content=build_instruction(progress)))
        return messages

    async def stream_execute(self, task: Task) -> AsyncIterator[StreamChunk]:
        state = task.workflow_state
        try:
            if state is None or state.phase != WorkflowPhase.RECOMMENDATION:
                raise WorkflowError("Invalid workflow state for recommendation")

            feedback = classify_feedback(task.query)
            if feedback is Feedback.POSITIVE:
                yield StreamChunk(
                    content=COMPLETION_MESSAGE,
                    finished=True,
                    workflow_state=state.advance(WorkflowPhase.COMPLETED),
                )
                return

            if notice := feedback_notice(feedback, state.progress):
                yield StreamChunk(content=notice + "\n\n", finished=False, workflow_state=state)

            parts: list[str] = []
            async for fragment in self._llm.stream_complete(self.build_messages(task)):
                parts.append(fragment)
                yield StreamChunk(content=fragment, finished=False, workflow_state=state)

            if extract_recommendation("".join(parts)) is None:
                fallback = fallback_recommendation(state.progress)
                log.info("recommendation_fallback_used", progress=state.progress, job_title=fallback.job_title)
                yield StreamChunk(
                    content="\n\n" + fallback.to_json(),
                    finished=True,
                    workflow_state=state,
                )
            else:
                yield StreamChunk(content="", finished=True, workflow_state=state)
        except Exception as e:
            log.warning("agent_stream_failed", node_id=self.node_id, error=str(e))
            yield StreamChunk(content=self.failure_notice(e), finished=True, workflow_state=None)
