"""Configuration models for the model client, coordinator, server and logging."""

from pydantic import BaseModel


class ModelClientConfig(BaseModel):
    """OpenAI-compatible backend (OpenAI, vLLM, LM Studio, LocalAI)."""

    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7  # Must be within [0, 2]
    max_tokens: int = 2000  # Must be > 0
    timeout: int = 120


class CoordinatorConfig(BaseModel):
    """Routing retry policy."""

    max_attempts: int = 3
    retry_base_delay: float = 1.0  # Seconds; wait before attempt n+1 is n * base


class SecurityConfig(BaseModel):
    """Security settings."""

    rate_limit_requests_per_minute: int = 60
    cors_origins: list[str] = ["http://localhost:3000"]


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Full application configuration."""

    server: ServerConfig = ServerConfig()
    model: ModelClientConfig = ModelClientConfig()
    coordinator: CoordinatorConfig = CoordinatorConfig()
    security: SecurityConfig = SecurityConfig()
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3
