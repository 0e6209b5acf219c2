"""Centralized logging configuration.
Call setup_logging() once at application startup (CLI run or API server).
"""

from __future__ import annotations

import logging
import sys

from oci_bom.config import get_settings

# Third-party loggers and the level they are held at
_LIBRARY_LEVELS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "anthropic": logging.WARNING,
    "google_genai": logging.WARNING,
    "langchain": logging.INFO,
    "langchain_core": logging.INFO,
    "langgraph": logging.INFO,
    "pymongo": logging.WARNING,
    "uvicorn": logging.INFO,
}


def setup_logging(level: str | None = None) -> None:
    """Install one stdout handler on the root logger; repeated calls are no-ops."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = level or get_settings().log_level
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s │ %(levelname)-7s │ %(name)s:%(lineno)d │ %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)

    for name, lib_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(lib_level)
