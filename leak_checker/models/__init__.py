"""Data models for the leak checker."""

from .finding import (
    DetectorType,
    SensitivityLevel,
    RiskLevel,
    Finding,
    DetectionSummary,
    DetectionResult,
    DETECTOR_LABELS,
    DETECTOR_DESCRIPTIONS,
    DETECTOR_RISK_LEVEL,
    is_detector_type,
    get_detectors_by_risk,
)
from .config import (
    ScanOptions,
    DEFAULT_CONTEXT_SIZE,
    DEFAULT_MAX_RESULTS,
    EntropyThresholds,
    ENTROPY_THRESHOLDS,
    SENSITIVITY_THRESHOLDS,
    Settings,
    get_settings,
)

__all__ = [
    "DetectorType",
    "SensitivityLevel",
    "RiskLevel",
    "Finding",
    "DetectionSummary",
    "DetectionResult",
    "DETECTOR_LABELS",
    "DETECTOR_DESCRIPTIONS",
    "DETECTOR_RISK_LEVEL",
    "is_detector_type",
    "get_detectors_by_risk",
    "ScanOptions",
    "DEFAULT_CONTEXT_SIZE",
    "DEFAULT_MAX_RESULTS",
    "EntropyThresholds",
    "ENTROPY_THRESHOLDS",
    "SENSITIVITY_THRESHOLDS",
    "Settings",
    "get_settings",
]
