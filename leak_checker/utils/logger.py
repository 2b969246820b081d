"""Logging utilities with automatic secret redaction."""

import sys
from typing import Callable, List, Optional
from loguru import logger
from pydantic import ValidationError
from pydantic_settings import SettingsError
from leak_checker.models import get_settings

# Records emitted while scanning or redacting are never rescanned
_ENGINE_PACKAGES = ("leak_checker.detectors", "leak_checker.anonymizers")

DEFAULT_LOG_LEVEL = "INFO"

# Sinks installed by setup_logging; sinks added by the host are left alone
_handler_ids: List[int] = []
_default_handler_removed = False


def redact_message(message: str) -> str:
    """
    Replace anything the detection engine flags in a log message.

    Args:
        message: Log message to redact

    Returns:
        Message with findings replaced by [REDACTED_...] markers
    """
    from leak_checker.anonymizers.redactor import redact
    from leak_checker.detectors.engine import quick_check, scan

    if not quick_check(message):
        return message
    return redact(message, scan(message).findings)


def make_redaction_filter(enabled: bool = True) -> Callable[[dict], bool]:
    """
    Build a loguru filter that redacts secrets from records.

    Args:
        enabled: When False the filter passes records through unchanged

    Returns:
        Filter function (always returns True, but may modify the record)
    """

    def redaction_filter(record: dict) -> bool:
        if not enabled:
            return True
        name = record.get("name") or ""
        if name.startswith(_ENGINE_PACKAGES):
            return True
        record["message"] = redact_message(record["message"])
        return True

    return redaction_filter


def _remove_installed_handlers() -> None:
    global _default_handler_removed

    while _handler_ids:
        logger.remove(_handler_ids.pop())

    # loguru's own stderr sink (id 0) is replaced once
    if not _default_handler_removed:
        _default_handler_removed = True
        try:
            logger.remove(0)
        except ValueError:
            logger.debug("Default loguru handler already removed by the host application")


def _resolve_level(log_level: str) -> str:
    log_level = log_level.upper()
    try:
        logger.level(log_level)
    except ValueError:
        sys.stderr.write(f"Unknown log level {log_level!r}, using {DEFAULT_LOG_LEVEL}\n")
        return DEFAULT_LOG_LEVEL
    return log_level


def setup_logging(log_file: Optional[str] = None, log_level: Optional[str] = None) -> None:
    """
    Configure logging with secret redaction.

    Only sinks installed by a previous call are replaced, so sinks added by
    a host application keep receiving records.

    Args:
        log_file: Path to log file (optional, no file sink if unset)
        log_level: Log level (default: INFO)
    """
    redaction_enabled = True
    try:
        settings = get_settings()
        log_level = log_level or settings.log_level
        log_file = log_file or settings.log_file
        redaction_enabled = settings.enable_log_redaction
    except (ValidationError, SettingsError) as e:
        sys.stderr.write(f"Invalid leak-checker settings, using defaults: {e}\n")

    log_level = _resolve_level(log_level or DEFAULT_LOG_LEVEL)
    redaction_filter = make_redaction_filter(redaction_enabled)

    _remove_installed_handlers()

    # Console handler with colors and redaction
    _handler_ids.append(
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=log_level,
            colorize=True,
            filter=redaction_filter,
        )
    )

    if log_file:
        _handler_ids.append(
            logger.add(
                log_file,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
                level=log_level,
                rotation="10 MB",
                retention="30 days",
                compression="zip",
                filter=redaction_filter,
            )
        )

    logger.debug(f"Logging initialized (redaction {'on' if redaction_enabled else 'off'})")


def get_logger(name: str):
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logger.bind(name=name)


# Initialize on import
try:
    setup_logging()
except OSError as e:
    # Fallback basic logging
    _remove_installed_handlers()
    _handler_ids.append(logger.add(sys.stderr, level=DEFAULT_LOG_LEVEL, filter=make_redaction_filter()))
    logger.warning(f"Failed to initialize full logging: {e}")
