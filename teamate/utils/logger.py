"""
Logging infrastructure for Teamate.

Loguru sinks for the console and a rotating log file, plus an audit file that
keeps one line per completed matching run or scored pair.
"""

import sys
from typing import Any, Mapping

from loguru import logger

from teamate.utils.config import LoggingSettings, get_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
AUDIT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[audit_type]} | {message}"
AUDIT_FILE_NAME = "matching_audit.log"


def _add_file_sinks(log_settings: LoggingSettings, diagnose: bool) -> None:
    log_file = log_settings.file_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        format=log_settings.format,
        level=log_settings.level,
        rotation=log_settings.rotation,
        retention=log_settings.retention,
        compression="zip",
        backtrace=True,
        diagnose=diagnose,
        enqueue=True,
    )

    # Only records bound with an audit_type reach the audit file
    logger.add(
        log_file.parent / AUDIT_FILE_NAME,
        format=AUDIT_FORMAT,
        level="INFO",
        filter=lambda record: "audit_type" in record["extra"],
        rotation="1 week",
        retention="1 year",
        enqueue=True,
    )


def setup_logging() -> None:
    """
    Configure application-wide logging from the LOG_ settings.

    Replaces loguru's default handler with a colored stderr sink and, when
    file output is enabled, the rotating log file and the audit file.
    """
    settings = get_settings()
    log_settings = settings.logging

    logger.remove()

    # Variable values in tracebacks only while developing
    diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=diagnose,
        )

    if log_settings.file_output:
        _add_file_sinks(log_settings, diagnose)

    logger.debug(
        f"Logging initialized - Level: {log_settings.level}, "
        f"file output: {log_settings.file_output}"
    )


def get_logger(name: str) -> Any:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name for the logger (typically __name__)

    Returns:
        A configured logger instance
    """
    return logger.bind(name=name)


def format_audit_details(details: Mapping[str, Any]) -> str:
    """Render audit details as `key=value` pairs, floats at 4 decimals."""
    parts = []
    for key, value in details.items():
        if isinstance(value, float):
            value = f"{value:.4f}"
        parts.append(f"{key}={value}")
    return " ".join(parts)


def audit_log(
    action: str,
    details: Mapping[str, Any],
    audit_type: str = "MATCHING",
) -> None:
    """
    Log an audit entry.

    Args:
        action: What happened (e.g. "matching_run_completed", "pair_scored")
        details: Figures describing the run or pair
        audit_type: MATCHING for full runs, SCORING for single pairs
    """
    logger.bind(audit_type=audit_type).info(f"{action} | {format_audit_details(details)}")


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyClass(LoggerMixin):
            def my_method(self):
                self.logger.info("Doing something...")
    """

    @property
    def logger(self) -> Any:
        """Get a logger instance for this class."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


# Auto-setup on import; an unwritable log directory falls back to loguru defaults
try:
    setup_logging()
except OSError as e:
    logger.warning(f"File logging unavailable: {e}")
