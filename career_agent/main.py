"""Application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from career_agent import __version__
from career_agent.api.container import get_container
from career_agent.api.dependencies import limiter
from career_agent.api.routes.chat import router as chat_router
from career_agent.domain.ports.config import AppConfig
from career_agent.infrastructure.config import load_config
from career_agent.shared.logging import setup_logging

log = structlog.get_logger()


def _apply_logging_config(config: AppConfig) -> None:
    """Apply logging from config (stdout + optional file)."""
    setup_logging(
        level=config.log_level,
        file_path=config.log_file or "",
        rotation_max_mb=config.log_rotation_max_mb,
        rotation_backups=config.log_rotation_backups,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging, then build the model client so bad [model] settings fail fast."""
    container = get_container()
    _apply_logging_config(container.config)
    log.info("startup_begin", model=container.config.model.model)
    _ = container.chat_use_case
    log.info("startup_complete")
    yield
    log.info("shutdown_begin")
    if hasattr(container.llm, "close"):
        try:
            await container.llm.close()
        except Exception:  # noqa: BLE001
            log.debug("llm_close_error", exc_info=True)
    log.info("shutdown_complete")


app = FastAPI(
    title="Career Agent",
    version=__version__,
    description="Query routing and career-positioning workflow over an OpenAI-compatible model",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS origins come straight from config; the model client is not built at import.
app.add_middleware(
    CORSMiddleware,
    allow_origins=load_config().security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


@app.get("/health")
@limiter.limit("100/minute")
async def health(request: Request) -> dict:
    """Health check with model backend availability."""
    container = get_container()
    llm_available = await container.llm.is_available()
    return {
        "status": "ok",
        "service": "career-agent",
        "model": container.config.model.model,
        "llm_available": llm_available,
    }
