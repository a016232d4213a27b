"""FastAPI dependencies - thin wrappers over the container."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from career_agent.api.container import get_container
from career_agent.application.chat.use_case import ChatUseCase
from career_agent.domain.ports.config import AppConfig

limiter = Limiter(key_func=get_remote_address)


def get_config() -> AppConfig:
    return get_container().config


def get_chat_use_case() -> ChatUseCase:
    return get_container().chat_use_case


def chat_rate_limit() -> str:
    """slowapi limit string from [security]; read per request so tests can swap config."""
    return f"{get_config().security.rate_limit_requests_per_minute}/minute"
