"""
Loguru based logging setup

One place to configure the log sink used by the cache and its callers.
The level is controlled by flags or the LOG_LEVEL setting.
"""

import re
import sys
from typing import Optional

from loguru import logger

from lazy_cache.shared.config.settings import reload_settings

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def sanitize_sensitive_info(message: str) -> str:
    """
    Mask secrets in a log message

    Cache keys and queries are caller data and may embed credentials,
    so values following password/key/token style names are masked.

    Args:
        message: raw log message

    Returns:
        sanitized message
    """
    message = re.sub(
        r"(password|passwd|pwd|api_key|apikey|token|secret)[=:\s]+[^\s,;&]+",
        r"\1=***",
        message,
        flags=re.IGNORECASE,
    )
    message = re.sub(r"(https?://)[^/\s:@]+:[^/\s@]+@", r"\1***@", message)
    return message


def _resolve_level(
    verbose: bool, quiet: bool, level_override: Optional[str]
) -> str:
    if level_override:
        return level_override.upper()
    if quiet:
        return "ERROR"
    if verbose:
        return "DEBUG"
    return reload_settings().log_level.upper()


def setup_logger(
    verbose: bool = False,
    quiet: bool = False,
    level_override: Optional[str] = None,
    sink=sys.stderr,
) -> str:
    """
    Configure the global loguru logger

    Args:
        verbose: enable DEBUG output
        quiet: only show ERROR and above
        level_override: explicit level (DEBUG/INFO/WARNING/ERROR)
        sink: where records are written

    Returns:
        the level that was applied
    """
    logger.remove()
    level = _resolve_level(verbose, quiet, level_override)

    def secure_message_filter(record):
        record["message"] = sanitize_sensitive_info(str(record["message"]))
        return True

    logger.add(
        sink,
        level=level,
        format=LOG_FORMAT,
        colorize=sink in (sys.stderr, sys.stdout),
        backtrace=True,
        diagnose=False,
        filter=secure_message_filter,
    )

    logger.debug(f"Logger initialized - Level: {level}")
    return level


def get_logger(name: str = "lazy_cache"):
    """
    Return a logger bound to a component name

    Args:
        name: component or module name

    Returns:
        bound loguru logger
    """
    return logger.bind(name=name)
