"""Configuration loading and validation."""

from career_agent.infrastructure.config.toml_loader import load_config
from career_agent.infrastructure.config.validator import validate_model_client_config

__all__ = ["load_config", "validate_model_client_config"]
