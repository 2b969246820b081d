"""Utility functions and helpers."""

from .logger import setup_logging, get_logger, make_redaction_filter, redact_message

__all__ = ["setup_logging", "get_logger", "make_redaction_filter", "redact_message"]
