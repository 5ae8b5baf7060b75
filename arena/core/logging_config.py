"""
Centralized logging configuration.

Call setup_logging() once at application startup (from the FastAPI lifespan
handler). Every source module gets its own logger via:

    import logging
    logger = logging.getLogger(__name__)

Level mapping:
  DEBUG   - coaching exchange details, feedback classification
  INFO    - session lifecycle (started, resumed, finalized)
  WARNING - fallback coaching text, swallowed best-effort failures
  ERROR   - finalize-save failures, broken scenario content
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger and quiet noisy third-party loggers."""
    fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        stream=sys.stdout,
        force=True,
    )

    for name in (
        "httpx",
        "httpcore",
        "anthropic",
        "aiosqlite",
        "sqlalchemy.engine",
        "uvicorn.access",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)
