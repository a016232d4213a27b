"""Logging setup: structlog events and stdlib records rendered by one formatter."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

# Per-request chatter from the HTTP client drowns out agent events at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def _build_formatter(level: int) -> structlog.stdlib.ProcessorFormatter:
    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    if level <= logging.DEBUG:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        # Chinese prompt/notice fragments stay readable in the JSON lines.
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def _rotating_file_handler(file_path: str, max_mb: int, backups: int) -> logging.Handler | None:
    path = Path(file_path.strip()).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=max_mb * 1024 * 1024,
            backupCount=backups,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Log file disabled: could not open {path}: {e}\n")
        return None


def setup_logging(
    level: str = "INFO",
    file_path: str = "",
    rotation_max_mb: int = 5,
    rotation_backups: int = 3,
) -> None:
    """Route structlog and stdlib logging to stdout, plus a rotating file if *file_path* is set.

    DEBUG renders human-readable console lines; any other level renders JSON.
    Calling again replaces the handlers installed by the previous call.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = _build_formatter(log_level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if file_path and file_path.strip():
        file_handler = _rotating_file_handler(file_path, rotation_max_mb, rotation_backups)
        if file_handler is not None:
            handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
