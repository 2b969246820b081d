"""Secret and PII leak detection for text leaving the user's control."""

__version__ = "0.1.0"

from leak_checker.anonymizers import RedactionStyle, mask, redact
from leak_checker.detectors import apply_allowlist, describe_finding, quick_check, scan
from leak_checker.models import (
    DetectionResult,
    DetectionSummary,
    DetectorType,
    Finding,
    ScanOptions,
    SensitivityLevel,
)

__all__ = [
    "__version__",
    "scan",
    "quick_check",
    "describe_finding",
    "apply_allowlist",
    "mask",
    "redact",
    "RedactionStyle",
    "DetectorType",
    "SensitivityLevel",
    "Finding",
    "DetectionResult",
    "DetectionSummary",
    "ScanOptions",
]
