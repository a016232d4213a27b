"""Select the prior turns that carry information-collection, assessment or analysis content."""

from collections.abc import Sequence

from career_agent.domain.ports.llm import LLMMessage

INFO_MARKERS = ("信息收集", "教育背景", "工作经验", "技能", "兴趣", "期望")
ASSESSMENT_MARKERS = ("测评问题", '"question"')
ANALYSIS_MARKERS = ("分析", "职业倾向", "优势", "特长", "适合")
CHOICE_LETTERS = frozenset("abcd")


def _is_choice_answer(message: LLMMessage) -> bool:
    return message.role == "user" and message.content.strip().lower() in CHOICE_LETTERS


def is_relevant(message: LLMMessage, *, include_analysis: bool = False) -> bool:
    """Keyword/shape heuristics for one message."""
    content = message.content
    if any(marker in content for marker in INFO_MARKERS):
        return True
    if any(marker in content for marker in ASSESSMENT_MARKERS) or _is_choice_answer(message):
        return True
    return include_analysis and any(marker in content for marker in ANALYSIS_MARKERS)


def filter_relevant_history(
    history: Sequence[LLMMessage],
    *,
    include_analysis: bool = False,
    fallback_window: int = 5,
) -> list[LLMMessage]:
    """Relevant turns in original order; the last *fallback_window* turns if none match.

    Pure: the input is not modified and each message appears at most once.
    """
    relevant = [m for m in history if is_relevant(m, include_analysis=include_analysis)]
    if relevant or not history or fallback_window <= 0:
        return relevant
    return list(history[-fallback_window:])
