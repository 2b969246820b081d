"""Redaction engines for detected values."""

from .redactor import (
    REDACTION_MARKERS,
    MarkerFormat,
    RedactionEngine,
    RedactionStyle,
    create_redaction_map,
    get_marker,
    mask,
    redact,
)

__all__ = [
    "RedactionEngine",
    "RedactionStyle",
    "MarkerFormat",
    "REDACTION_MARKERS",
    "mask",
    "redact",
    "get_marker",
    "create_redaction_map",
]
