"""
Logging configuration for the DeFi Research Agent.

Console output goes to stderr so a report written to stdout stays clean.
An optional rotating file sink keeps a plain-text history.
"""

import re
import sys
from typing import Callable, Dict, Optional

from loguru import logger

# Leading "2024-01-01 12:00:00.123 | " fragments re-logged from other loggers
_TIMESTAMP_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d+ \| ")

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name: <40} | "
    "{function: <20} | "
    "{message}"
)


def format_record(record: Dict) -> str:
    """
    Clean console format: the message only, coloured by level.
    """
    message = record["message"]

    # Escape curly braces to prevent format string errors
    message = message.replace("{", "{{").replace("}", "}}").replace("<", r"\<")
    message = _TIMESTAMP_PREFIX.sub("", message)

    level = record["level"].name
    if level == "DEBUG":
        return f"<dim>{message}</dim>\n"
    if level in ("ERROR", "CRITICAL"):
        return f"<red>{message}</red>\n"
    if level == "WARNING":
        return f"<yellow>{message}</yellow>\n"
    if level == "SUCCESS":
        return f"<green><bold>{message}</bold></green>\n"
    return f"{message}\n"


def get_console_format(style: str = "clean"):
    """Get console format based on style preference."""
    if style == "timestamp":
        return "<dim>{time:HH:mm:ss}</dim> | <level>{message}</level>"
    elif style == "detailed":
        return "<green>{time:HH:mm:ss}</green> | <level>{level: <5}</level> | <dim>{name}</dim> | <level>{message}</level>"
    else:
        return format_record


def setup_logging(config: "LoggingConfig", console_filter: Optional[Callable] = None) -> None:
    """
    Set up logging sinks.

    Args:
        config: LoggingConfig instance
        console_filter: Optional filter function for console output
    """
    logger.remove()

    if config.enable_console:
        logger.add(
            sys.stderr,
            format=get_console_format(config.console_style),
            level=config.level,
            colorize=True,
            filter=console_filter,
            backtrace=True,
            diagnose=False,
        )

    if config.enable_file:
        log_path = config.get_log_file_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_path),
            format=FILE_FORMAT,
            level=config.level,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logger.debug(f"Logging configured: level={config.level}")


def create_module_filter(module_levels: Dict[str, str]) -> Callable:
    """
    Create a filter function based on module-specific log levels.

    Args:
        module_levels: Dict mapping module name prefixes to log levels

    Returns:
        Filter function for loguru
    """
    def filter_func(record):
        module = record["name"] or ""

        for pattern, level in module_levels.items():
            if module.startswith(pattern):
                return record["level"].no >= logger.level(level.upper()).no

        return True

    return filter_func
