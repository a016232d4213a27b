"""Dependency Injection Container - centralized service management."""

from functools import cached_property
from typing import TYPE_CHECKING

from career_agent.domain.ports.config import AppConfig
from career_agent.domain.ports.llm import LLMPort
from career_agent.infrastructure.config import load_config

if TYPE_CHECKING:
    from career_agent.application.chat.use_case import ChatUseCase
    from career_agent.infrastructure.agents.coordinator import CoordinatorAgent


class Container:
    """Lazily built, cached services.

    The model client is shared; conversation agents and workflows are built
    fresh for every turn by the factories handed to ChatUseCase.
    """

    def __init__(self, config: AppConfig | None = None, llm: LLMPort | None = None):
        """Optional overrides for tests: a ready config and/or a fake LLM."""
        self._config_override = config
        self._llm_override = llm

    @cached_property
    def config(self) -> AppConfig:
        """Application configuration."""
        if self._config_override:
            return self._config_override
        return load_config()

    @cached_property
    def llm(self) -> LLMPort:
        """OpenAI-compatible model client. Raises ConfigurationError on bad [model] settings."""
        if self._llm_override is not None:
            return self._llm_override
        from career_agent.infrastructure.llm.openai_compatible import ModelClient

        return ModelClient(self.config.model)

    @cached_property
    def coordinator(self) -> "CoordinatorAgent":
        """Router shared across turns; holds no per-turn state."""
        from career_agent.infrastructure.agents.coordinator import CoordinatorAgent

        return CoordinatorAgent(
            self.llm,
            max_attempts=self.config.coordinator.max_attempts,
            retry_base_delay=self.config.coordinator.retry_base_delay,
        )

    @cached_property
    def chat_use_case(self) -> "ChatUseCase":
        """Chat use case with per-turn agent factories."""
        from career_agent.application.chat.use_case import ChatUseCase
        from career_agent.infrastructure.agents.conversation import ConversationAgent
        from career_agent.infrastructure.workflow.career_positioning import (
            CareerPositioningWorkflow,
        )

        llm = self.llm
        return ChatUseCase(
            coordinator=self.coordinator,
            conversation_factory=lambda: ConversationAgent(llm),
            workflow_factory=lambda: CareerPositioningWorkflow(llm),
        )

    def reset(self) -> None:
        """Drop cached instances (useful for testing)."""
        for attr in list(self.__dict__.keys()):
            if not attr.startswith("_"):
                delattr(self, attr)


_container: Container | None = None


def get_container() -> Container:
    """Get or create global container instance."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset global container (for testing)."""
    global _container
    if _container:
        _container.reset()
    _container = None
