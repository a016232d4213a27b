"""Agent nodes."""

from career_agent.infrastructure.agents.base import AgentNode
from career_agent.infrastructure.agents.conversation import ConversationAgent
from career_agent.infrastructure.agents.coordinator import CoordinatorAgent, RouteDecision

__all__ = ["AgentNode", "ConversationAgent", "CoordinatorAgent", "RouteDecision"]
