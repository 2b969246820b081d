"""Configuration models."""

from typing import Any, Dict, List, Optional, Set
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .finding import DetectorType, SensitivityLevel

# Minimum confidence a finding needs to be reported, per sensitivity level
SENSITIVITY_THRESHOLDS: Dict[SensitivityLevel, float] = {
    SensitivityLevel.LOW: 0.8,
    SensitivityLevel.MEDIUM: 0.6,
    SensitivityLevel.HIGH: 0.4,
}

DEFAULT_MAX_RESULTS = 50
DEFAULT_CONTEXT_SIZE = 50


class EntropyThresholds(BaseModel):
    """Thresholds for entropy-based detection.

    Shannon entropy of a random base62 string approaches log2(62) ~= 5.95.
    """

    model_config = ConfigDict(frozen=True)

    min_length: int = Field(16, description="Shortest candidate analysed")
    max_length: int = Field(128, description="Longest candidate analysed")
    suspicious: float = Field(3.5, description="Lowest-confidence tier")
    likely: float = Field(4.0, description="Likely secret")
    definite: float = Field(4.5, description="Almost certainly a secret")


ENTROPY_THRESHOLDS = EntropyThresholds()


def _as_string_list(value: Any, field_name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    try:
        return [str(item) for item in value]
    except TypeError:
        logger.warning(f"Ignoring malformed {field_name} option: {type(value).__name__}")
        return []


def _as_non_negative_int(value: Any, default: int, field_name: str) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {field_name} {value!r}, using {default}")
        return default
    if number < 0:
        logger.warning(f"Negative {field_name} {number}, using {default}")
        return default
    return number


class ScanOptions(BaseModel):
    """Options for a single scan.

    Every field is normalized on construction; malformed values fall back
    to their defaults instead of raising.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enabled_detectors: Set[DetectorType] = Field(default_factory=lambda: set(DetectorType))
    sensitivity_level: SensitivityLevel = Field(SensitivityLevel.MEDIUM)
    max_results: int = Field(DEFAULT_MAX_RESULTS)
    include_context: bool = Field(True)
    context_size: int = Field(DEFAULT_CONTEXT_SIZE)
    filter_domains: List[str] = Field(default_factory=list)
    min_confidence: Optional[float] = Field(None, description="Overrides the sensitivity table")
    allowlist: List[str] = Field(default_factory=list, description="Applied by callers, not by scan")

    @field_validator("enabled_detectors", mode="before")
    @classmethod
    def _normalize_detectors(cls, value: Any) -> Set[DetectorType]:
        """Collapse a set, list or type->bool mapping into a set."""
        if value is None:
            return set(DetectorType)

        if isinstance(value, dict):
            names = [name for name, enabled in value.items() if enabled]
        elif isinstance(value, (str, DetectorType)):
            names = [value]
        else:
            try:
                names = list(value)
            except TypeError:
                logger.warning("Malformed enabled_detectors option, enabling all detectors")
                return set(DetectorType)

        detectors: Set[DetectorType] = set()
        for name in names:
            try:
                detectors.add(DetectorType(name))
            except ValueError:
                logger.warning(f"Ignoring unknown detector type: {name!r}")
        return detectors

    @field_validator("sensitivity_level", mode="before")
    @classmethod
    def _normalize_sensitivity(cls, value: Any) -> SensitivityLevel:
        if isinstance(value, SensitivityLevel):
            return value
        if isinstance(value, str) and value.lower() in SensitivityLevel._value2member_map_:
            return SensitivityLevel(value.lower())
        logger.warning(f"Unrecognized sensitivity level {value!r}, using medium")
        return SensitivityLevel.MEDIUM

    @field_validator("max_results", mode="before")
    @classmethod
    def _normalize_max_results(cls, value: Any) -> int:
        return _as_non_negative_int(value, DEFAULT_MAX_RESULTS, "max_results")

    @field_validator("context_size", mode="before")
    @classmethod
    def _normalize_context_size(cls, value: Any) -> int:
        return _as_non_negative_int(value, DEFAULT_CONTEXT_SIZE, "context_size")

    @field_validator("include_context", mode="before")
    @classmethod
    def _normalize_include_context(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value in (0, 1):
            return bool(value)
        logger.warning(f"Invalid include_context {value!r}, using True")
        return True

    @field_validator("min_confidence", mode="before")
    @classmethod
    def _normalize_min_confidence(cls, value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid min_confidence {value!r}, using sensitivity threshold")
            return None
        if not 0.0 <= number <= 1.0:
            logger.warning(f"min_confidence {number} outside [0, 1], using sensitivity threshold")
            return None
        return number

    @field_validator("filter_domains", mode="before")
    @classmethod
    def _normalize_filter_domains(cls, value: Any) -> List[str]:
        return _as_string_list(value, "filter_domains")

    @field_validator("allowlist", mode="before")
    @classmethod
    def _normalize_allowlist(cls, value: Any) -> List[str]:
        return _as_string_list(value, "allowlist")

    @classmethod
    def from_any(cls, options: Any = None, **overrides: Any) -> "ScanOptions":
        """Build options from None, a dict (snake_case or camelCase) or an instance."""
        if isinstance(options, ScanOptions):
            data = options.model_dump()
        elif isinstance(options, dict):
            data = dict(options)
        else:
            if options is not None:
                logger.warning(f"Ignoring malformed scan options: {type(options).__name__}")
            data = {}
        data.update(overrides)
        return cls.model_validate(data)

    def confidence_threshold(self) -> float:
        """Explicit min_confidence, else the sensitivity table."""
        if self.min_confidence is not None:
            return self.min_confidence
        return SENSITIVITY_THRESHOLDS[self.sensitivity_level]

    def entropy_threshold(self, thresholds: EntropyThresholds = ENTROPY_THRESHOLDS) -> float:
        if self.sensitivity_level == SensitivityLevel.HIGH:
            return thresholds.suspicious
        if self.sensitivity_level == SensitivityLevel.LOW:
            return thresholds.definite
        return thresholds.likely


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="LEAK_CHECKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    log_file: Optional[str] = Field(None, description="Log file path (no file sink if unset)")
    enable_log_redaction: bool = Field(True, description="Redact secrets in log records")

    # Detection
    sensitivity_level: str = Field("medium", description="low, medium or high")
    disabled_detectors: List[str] = Field(default_factory=list, description="Detector types to skip")
    filter_domains: List[str] = Field(default_factory=list, description="Email domains to ignore")
    allowlist: List[str] = Field(default_factory=list, description="Exact values never reported")
    max_results: int = Field(DEFAULT_MAX_RESULTS, description="Max findings per scan")
    include_context: bool = Field(True, description="Attach context snippets")
    context_size: int = Field(DEFAULT_CONTEXT_SIZE, description="Context characters per side")

    # Redaction
    redaction_style: str = Field("marker", description="marker, mask, remove or hash")
    marker_format: Optional[str] = Field(None, description="bracket, asterisk or placeholder")

    def scan_options(self) -> ScanOptions:
        """Options a collaborator passes to scan()."""
        disabled = {name.lower() for name in self.disabled_detectors}
        return ScanOptions(
            enabled_detectors={dtype.value: dtype.value not in disabled for dtype in DetectorType},
            sensitivity_level=self.sensitivity_level,
            max_results=self.max_results,
            include_context=self.include_context,
            context_size=self.context_size,
            filter_domains=self.filter_domains,
            allowlist=self.allowlist,
        )


# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings
