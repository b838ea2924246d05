# src/levstation/core/configure_logging.py

import sys
from typing import Union

from loguru import logger
from omegaconf import DictConfig

LOG_LEVELS = (
    "TRACE",
    "DEBUG",
    "INFO",
    "SUCCESS",
    "WARNING",
    "ERROR",
    "CRITICAL",
)

# Plain level + message for routine progress lines
SHORT_FORMAT = "<level>{level:8}</level> | <level>{message}</level>\n"

# Timestamp and call site, for warnings and verbose runs
FULL_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level:8}</level> | "
    "<cyan>{name}</cyan>:"
    "<cyan>{function}</cyan>:"
    "<cyan>{line}</cyan> - "
    "<level>{message}</level>\n"
)


def level_from_config(cfg: DictConfig) -> str | None:
    """
    ``logging.level`` of a resolved lev-station config, if set.
    """
    logging_cfg = cfg.get("logging") or {}
    return logging_cfg.get("level")


def configure_logging(
    log_level: Union[str, DictConfig] | None = "INFO",
    sink=None,
):
    """
    Route loguru output to a single handler at the requested level.

    ``log_level`` may be a level name or a resolved config carrying
    ``logging.level``. A falsy level keeps the current handlers.

    Records at INFO and SUCCESS print as ``LEVEL | message`` unless the
    level is DEBUG or TRACE; everything else gets the timestamped format
    with the emitting function. ``sink`` defaults to the stderr in effect
    at call time.
    """
    if isinstance(log_level, DictConfig):
        log_level = level_from_config(log_level)

    if not log_level:
        return

    log_level = str(log_level).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_level}")

    verbose = log_level in {"DEBUG", "TRACE"}

    def dynamic_format(record):
        if not verbose and record["level"].name in {"INFO", "SUCCESS"}:
            return SHORT_FORMAT
        return FULL_FORMAT

    logger.remove()
    logger.add(
        sink if sink is not None else sys.stderr,
        level=log_level,
        format=dynamic_format,
        backtrace=(log_level == "TRACE"),
        diagnose=(log_level == "TRACE"),
        enqueue=False,
    )

    logger.debug("Loguru configured (level={})", log_level)
