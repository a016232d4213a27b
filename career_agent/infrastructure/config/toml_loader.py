"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from career_agent.domain.ports.config import (
    AppConfig,
    CoordinatorConfig,
    ModelClientConfig,
    SecurityConfig,
    ServerConfig,
)

logger = logging.getLogger(__name__)


def _load_toml(path: Path) -> dict:
    """Load TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _set_number(config: dict, section: str, key: str, env_name: str, cast: type) -> None:
    """Copy a numeric env var into config; invalid values are logged and ignored."""
    raw = os.getenv(env_name)
    if not raw:
        return
    try:
        config.setdefault(section, {})[key] = cast(raw)
    except ValueError:
        logger.warning("Invalid %s env value: %r, ignoring", env_name, raw)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if api_key := os.getenv("OPENAI_API_KEY"):
        config.setdefault("model", {})["api_key"] = api_key.strip()
    if base_url := os.getenv("OPENAI_BASE_URL"):
        config.setdefault("model", {})["base_url"] = base_url.strip()
    if model := os.getenv("OPENAI_MODEL"):
        config.setdefault("model", {})["model"] = model.strip()
    _set_number(config, "model", "temperature", "OPENAI_TEMPERATURE", float)
    _set_number(config, "model", "max_tokens", "OPENAI_MAX_TOKENS", int)
    _set_number(config, "server", "port", "PORT", int)
    _set_number(config, "security", "rate_limit_requests_per_minute", "RATE_LIMIT_PER_MINUTE", int)
    if level := os.getenv("LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    if origins := os.getenv("CORS_ORIGINS"):
        config.setdefault("security", {})["cors_origins"] = [o.strip() for o in origins.split(",")]
    return config


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists. Values are not
    range-checked here; the model client validates its section on construction.
    """
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent.parent.parent / "config"

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = _load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        dev_config = _load_toml(dev_path)
        for key, value in dev_config.items():
            if isinstance(value, dict) and key in config and isinstance(config[key], dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

    config = _apply_env_overrides(config)

    logging_raw = config.get("logging") or {}
    return AppConfig(
        server=ServerConfig(**(config.get("server") or {})),
        model=ModelClientConfig(**(config.get("model") or {})),
        coordinator=CoordinatorConfig(**(config.get("coordinator") or {})),
        security=SecurityConfig(**(config.get("security") or {})),
        log_level=logging_raw.get("level", "INFO"),
        log_file=(logging_raw.get("file") or "").strip(),
        log_rotation_max_mb=int(logging_raw.get("log_rotation_max_mb", 5)),
        log_rotation_backups=int(logging_raw.get("log_rotation_backups", 3)),
    )
