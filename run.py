#!/usr/bin/env python3
"""Start the career agent API with uvicorn."""
import os

import uvicorn

from career_agent.infrastructure.config import load_config


def main() -> None:
    config = load_config()
    uvicorn.run(
        "career_agent.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=os.getenv("RELOAD", "").lower() in ("1", "true"),
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
