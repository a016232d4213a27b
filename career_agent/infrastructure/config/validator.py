"""Eager validation of the model client configuration."""

import structlog

from career_agent.domain.errors import ConfigurationError
from career_agent.domain.ports.config import ModelClientConfig

log = structlog.get_logger()


def validate_model_client_config(config: ModelClientConfig) -> None:
    """Raise ConfigurationError for a missing credential or out-of-range parameters.

    Called when a model client is constructed, so a bad config fails at startup
    rather than on the first request.
    """
    if not config.api_key or not config.api_key.strip():
        raise ConfigurationError("OpenAI API key is required (set OPENAI_API_KEY)")
    if not 0 <= config.temperature <= 2:
        raise ConfigurationError(
            f"OpenAI temperature must be between 0 and 2, got {config.temperature}"
        )
    if config.max_tokens <= 0:
        raise ConfigurationError(
            f"OpenAI max tokens must be greater than 0, got {config.max_tokens}"
        )
    if not config.base_url.strip():
        raise ConfigurationError("OpenAI base URL must not be empty")
    log.debug(
        "model_config_ok",
        base_url=config.base_url,
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
