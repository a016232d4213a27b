"""Assessment specialist - deterministic 15-question career questionnaire, no model calls."""

import json
from collections.abc import AsyncIterator, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from career_agent.domain.entities.workflow_state import StreamChunk, Task, WorkflowPhase
from career_agent.domain.errors import WorkflowError
from career_agent.domain.ports.llm import LLMMessage
from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.prompts import ASSESSMENT_PROMPT

log = structlog.get_logger()


class AssessmentQuestion(BaseModel):
    """Question text plus four labeled options."""

    model_config = ConfigDict(frozen=True)

    question: str
    A: str
    B: str
    C: str
    D: str

    @property
    def options(self) -> dict[str, str]:
        return {"A": self.A, "B": self.B, "C": self.C, "D": self.D}

    def to_json(self) -> str:
        return json.dumps(self.model_dump(), ensure_ascii=False, separators=(",", ":"))


QUESTION_BANK: tuple[AssessmentQuestion, ...] = (
    AssessmentQuestion(
        question="在工作中，你更倾向于哪种工作方式？",
        A="独立完成任务，自主决策",
        B="与团队密切合作，共同完成",
        C="领导团队，指导他人工作",
        D="按照明确指示执行任务",
    ),
    AssessmentQuestion(
        question="面对新的挑战时，你的第一反应是什么？",
        A="兴奋地接受挑战，寻找创新解决方案",
        B="仔细分析风险，制定详细计划",
        C="寻求他人建议和支持",
        D="希望有明确的指导和标准流程",
    ),
    AssessmentQuestion(
        question="你最看重工作中的哪个方面？",
        A="工作内容的创新性和挑战性",
        B="工作环境的稳定性和安全感",
        C="薪资待遇和福利保障",
        D="个人成长和职业发展机会",
    ),
    AssessmentQuestion(
        question="在团队中，你通常扮演什么角色？",
        A="创意提供者，提出新想法",
        B="执行者，确保任务按时完成",
        C="协调者，促进团队沟通",
        D="分析者，提供数据和逻辑支持",
    ),
    AssessmentQuestion(
        question="你更喜欢哪种工作环境？",
        A="开放式办公室，充满活力",
        B="安静的独立办公空间",
        C="经常出差，接触不同环境",
        D="在家办公，灵活自由",
    ),
    AssessmentQuestion(
        question="处理工作压力时，你的方式是？",
        A="将压力转化为动力，提高效率",
        B="寻求同事或上级的帮助",
        C="制定详细计划，逐步解决",
        D="暂时放松，调整心态后再处理",
    ),
    AssessmentQuestion(
        question="你认为理想的工作时间安排是？",
        A="固定的朝九晚五",
        B="弹性工作时间",
        C="项目制，根据任务调整",
        D="轮班制，有规律的变化",
    ),
    AssessmentQuestion(
        question="在职业发展中，你最重视什么？",
        A="专业技能的深度发展",
        B="管理能力的提升",
        C="人际关系网络的建立",
        D="跨领域知识的积累",
    ),
    AssessmentQuestion(
        question="你更倾向于哪种学习方式？",
        A="通过实践和试错学习",
        B="系统性的理论学习",
        C="向他人请教和交流",
        D="自主研究和探索",
    ),
    AssessmentQuestion(
        question="面对工作中的冲突，你会？",
        A="直接沟通，寻求解决方案",
        B="避免冲突，寻求妥协",
        C="寻求第三方调解",
        D="坚持自己的立场和原则",
    ),
    AssessmentQuestion(
        question="你最享受工作中的哪个环节？",
        A="创意构思和方案设计",
        B="具体执行和操作",
        C="结果展示和成果分享",
        D="问题分析和解决",
    ),
    AssessmentQuestion(
        question="对于工作反馈，你更希望？",
        A="及时的正面鼓励",
        B="详细的改进建议",
        C="定期的正式评估",
        D="同事间的相互反馈",
    ),
    AssessmentQuestion(
        question="你认为最重要的工作技能是？",
        A="沟通协调能力",
        B="专业技术能力",
        C="创新思维能力",
        D="执行落地能力",
    ),
    AssessmentQuestion(
        question="在选择工作时，你最关注？",
        A="公司的发展前景",
        B="岗位的匹配度",
        C="团队的工作氛围",
        D="薪资福利待遇",
    ),
    AssessmentQuestion(
        question="你希望在工作中获得什么样的成就感？",
        A="解决复杂问题的满足感",
        B="帮助他人成长的成就感",
        C="创造新价值的自豪感",
        D="完成目标的胜利感",
    ),
)

TOTAL_QUESTIONS = len(QUESTION_BANK)
FINISHED_NOTICE = "测评完成，开始分析..."


def is_valid_choice(text: str) -> bool:
    """Single letter A-D, case-insensitive, surrounding whitespace ignored."""
    return text.strip().lower() in ("a", "b", "c", "d")


def question_header(index: int) -> str:
    return f"测评问题 {index + 1}/{TOTAL_QUESTIONS}"


def format_question(index: int) -> str:
    """Progress header plus the question object as compact JSON."""
    if not 0 <= index < TOTAL_QUESTIONS:
        raise WorkflowError(f"Question not found for index: {index}")
    return f"{question_header(index)}\n\n{QUESTION_BANK[index].to_json()}"


def was_asked(history: Sequence[LLMMessage], index: int) -> bool:
    """True if the latest assistant turn presented question *index*."""
    for message in reversed(history):
        if message.role == "assistant":
            return question_header(index) in message.content
    return False


class AssessmentAgent(AgentNode):
    """Emits the question selected by progress as a single terminal chunk."""

    node_id = "assessment"
    description = "负责进行职业测评"
    system_prompt = ASSESSMENT_PROMPT

    def failure_notice(self, error: Exception) -> str:
        return f"测评阶段执行失败: {error}"

    async def stream_execute(self, task: Task) -> AsyncIterator[StreamChunk]:
        """State is passed through unchanged; the workflow advances progress on answers."""
        state = task.workflow_state
        try:
            if state is None or state.phase != WorkflowPhase.ASSESSMENT:
                raise WorkflowError("Invalid workflow state for assessment")
            content = format_question(state.progress)
        except WorkflowError as e:
            log.warning("assessment_invalid_state", error=str(e))
            yield StreamChunk(content=self.failure_notice(e), finished=True, workflow_state=None)
            return
        yield StreamChunk(content=content, finished=True, workflow_state=state)
