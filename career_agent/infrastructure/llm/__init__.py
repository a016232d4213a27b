"""Model clients."""

from career_agent.infrastructure.llm.openai_compatible import ModelClient

__all__ = ["ModelClient"]
