"""Specialist agents, one per workflow phase."""

from career_agent.infrastructure.workflow.specialists.analysis import AnalysisAgent
from career_agent.infrastructure.workflow.specialists.assessment import AssessmentAgent
from career_agent.infrastructure.workflow.specialists.info_collection import InfoCollectionAgent
from career_agent.infrastructure.workflow.specialists.recommendation import RecommendationAgent

__all__ = ["AnalysisAgent", "AssessmentAgent", "InfoCollectionAgent", "RecommendationAgent"]
