"""Logging setup (loguru)."""

from __future__ import annotations

import os
import sys
from typing import Any

from loguru import logger

from bianco.config import cfg

_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")


def _safe_message_filter(record: Any) -> bool:
    """Escape braces/angles in log messages to prevent format/tag errors."""
    if isinstance(record.get("message"), str):
        msg = record["message"]
        msg = msg.replace("{", "{{").replace("}", "}}").replace("<", "\\<")
        record["message"] = msg
    return True


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default sink.
    Level: verbose=True enables DEBUG; otherwise LOG_LEVEL env, then cfg.log_level."""
    level = "INFO"
    if verbose:
        level = "DEBUG"
    else:
        env_level = (os.environ.get("LOG_LEVEL") or "").upper()
        if env_level in _LEVELS:
            level = env_level
        elif cfg.log_level in _LEVELS:
            level = cfg.log_level

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=("<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}"),
        filter=_safe_message_filter,
    )
