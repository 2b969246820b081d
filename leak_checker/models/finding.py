"""Data models for detection findings."""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class DetectorType(str, Enum):
    """Categories of sensitive data the engine can report."""

    # API keys - prefix based
    API_KEY_OPENAI = "api_key_openai"
    API_KEY_AWS = "api_key_aws"
    API_KEY_GITHUB = "api_key_github"
    API_KEY_STRIPE = "api_key_stripe"
    API_KEY_SLACK = "api_key_slack"
    API_KEY_GOOGLE = "api_key_google"
    API_KEY_ANTHROPIC = "api_key_anthropic"
    API_KEY_SENDGRID = "api_key_sendgrid"
    API_KEY_TWILIO = "api_key_twilio"
    API_KEY_MAILCHIMP = "api_key_mailchimp"
    API_KEY_HEROKU = "api_key_heroku"
    API_KEY_NPM = "api_key_npm"
    API_KEY_PYPI = "api_key_pypi"
    API_KEY_DOCKER = "api_key_docker"
    API_KEY_SUPABASE = "api_key_supabase"
    API_KEY_FIREBASE = "api_key_firebase"

    # API keys - entropy based
    API_KEY_GENERIC = "api_key_generic"

    # Secrets
    PRIVATE_KEY = "private_key"
    PASSWORD = "password"

    # Financial
    CREDIT_CARD = "credit_card"
    IBAN = "iban"

    # Personal data
    EMAIL = "email"
    PHONE_UK = "phone_uk"
    UK_NI_NUMBER = "uk_ni_number"
    US_SSN = "us_ssn"

    # Generic
    HIGH_ENTROPY = "high_entropy"


class SensitivityLevel(str, Enum):
    """Coarse knob controlling confidence and entropy thresholds."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    """Risk associated with leaking a detector type."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


DETECTOR_LABELS: Dict[DetectorType, str] = {
    DetectorType.API_KEY_OPENAI: "OpenAI API Key",
    DetectorType.API_KEY_AWS: "AWS Credentials",
    DetectorType.API_KEY_GITHUB: "GitHub Token",
    DetectorType.API_KEY_STRIPE: "Stripe API Key",
    DetectorType.API_KEY_SLACK: "Slack Token",
    DetectorType.API_KEY_GOOGLE: "Google API Key",
    DetectorType.API_KEY_ANTHROPIC: "Anthropic API Key",
    DetectorType.API_KEY_SENDGRID: "SendGrid API Key",
    DetectorType.API_KEY_TWILIO: "Twilio Credentials",
    DetectorType.API_KEY_MAILCHIMP: "Mailchimp API Key",
    DetectorType.API_KEY_HEROKU: "Heroku API Key",
    DetectorType.API_KEY_NPM: "npm Access Token",
    DetectorType.API_KEY_PYPI: "PyPI API Token",
    DetectorType.API_KEY_DOCKER: "Docker Hub Token",
    DetectorType.API_KEY_SUPABASE: "Supabase API Key",
    DetectorType.API_KEY_FIREBASE: "Firebase API Key",
    DetectorType.API_KEY_GENERIC: "Possible API Key",
    DetectorType.PRIVATE_KEY: "Private Key",
    DetectorType.PASSWORD: "Password",
    DetectorType.CREDIT_CARD: "Credit Card Number",
    DetectorType.IBAN: "Bank Account (IBAN)",
    DetectorType.EMAIL: "Email Address",
    DetectorType.PHONE_UK: "UK Phone Number",
    DetectorType.UK_NI_NUMBER: "UK National Insurance Number",
    DetectorType.US_SSN: "US Social Security Number",
    DetectorType.HIGH_ENTROPY: "High-Entropy Secret",
}

# Lower-case phrasing used in warning text ("Found an OpenAI API key").
DETECTOR_DESCRIPTIONS: Dict[DetectorType, str] = {
    DetectorType.API_KEY_OPENAI: "OpenAI API key",
    DetectorType.API_KEY_AWS: "AWS credentials",
    DetectorType.API_KEY_GITHUB: "GitHub token",
    DetectorType.API_KEY_STRIPE: "Stripe API key",
    DetectorType.API_KEY_SLACK: "Slack token",
    DetectorType.API_KEY_GOOGLE: "Google API key",
    DetectorType.API_KEY_ANTHROPIC: "Anthropic API key",
    DetectorType.API_KEY_SENDGRID: "SendGrid API key",
    DetectorType.API_KEY_TWILIO: "Twilio credentials",
    DetectorType.API_KEY_MAILCHIMP: "Mailchimp API key",
    DetectorType.API_KEY_HEROKU: "Heroku API key",
    DetectorType.API_KEY_NPM: "npm access token",
    DetectorType.API_KEY_PYPI: "PyPI API token",
    DetectorType.API_KEY_DOCKER: "Docker Hub token",
    DetectorType.API_KEY_SUPABASE: "Supabase API key",
    DetectorType.API_KEY_FIREBASE: "Firebase API key",
    DetectorType.API_KEY_GENERIC: "API key",
    DetectorType.PRIVATE_KEY: "Private key",
    DetectorType.PASSWORD: "Password",
    DetectorType.CREDIT_CARD: "Credit card number",
    DetectorType.IBAN: "Bank account (IBAN)",
    DetectorType.EMAIL: "Email address",
    DetectorType.PHONE_UK: "UK phone number",
    DetectorType.UK_NI_NUMBER: "UK National Insurance number",
    DetectorType.US_SSN: "US Social Security number",
    DetectorType.HIGH_ENTROPY: "High-entropy secret",
}

DETECTOR_RISK_LEVEL: Dict[DetectorType, RiskLevel] = {
    DetectorType.API_KEY_OPENAI: RiskLevel.CRITICAL,
    DetectorType.API_KEY_AWS: RiskLevel.CRITICAL,
    DetectorType.API_KEY_GITHUB: RiskLevel.CRITICAL,
    DetectorType.API_KEY_STRIPE: RiskLevel.CRITICAL,
    DetectorType.API_KEY_SLACK: RiskLevel.HIGH,
    DetectorType.API_KEY_GOOGLE: RiskLevel.HIGH,
    DetectorType.API_KEY_ANTHROPIC: RiskLevel.CRITICAL,
    DetectorType.API_KEY_SENDGRID: RiskLevel.HIGH,
    DetectorType.API_KEY_TWILIO: RiskLevel.HIGH,
    DetectorType.API_KEY_MAILCHIMP: RiskLevel.MEDIUM,
    DetectorType.API_KEY_HEROKU: RiskLevel.HIGH,
    DetectorType.API_KEY_NPM: RiskLevel.HIGH,
    DetectorType.API_KEY_PYPI: RiskLevel.HIGH,
    DetectorType.API_KEY_DOCKER: RiskLevel.HIGH,
    DetectorType.API_KEY_SUPABASE: RiskLevel.HIGH,
    DetectorType.API_KEY_FIREBASE: RiskLevel.HIGH,
    DetectorType.API_KEY_GENERIC: RiskLevel.MEDIUM,
    DetectorType.PRIVATE_KEY: RiskLevel.CRITICAL,
    DetectorType.PASSWORD: RiskLevel.HIGH,
    DetectorType.CREDIT_CARD: RiskLevel.CRITICAL,
    DetectorType.IBAN: RiskLevel.HIGH,
    DetectorType.EMAIL: RiskLevel.MEDIUM,
    DetectorType.PHONE_UK: RiskLevel.MEDIUM,
    DetectorType.UK_NI_NUMBER: RiskLevel.HIGH,
    DetectorType.US_SSN: RiskLevel.CRITICAL,
    DetectorType.HIGH_ENTROPY: RiskLevel.MEDIUM,
}


def is_detector_type(value: str) -> bool:
    """Check whether a string names a known detector type."""
    return value in DetectorType._value2member_map_


def get_detectors_by_risk(risk: RiskLevel) -> List[DetectorType]:
    """Get all detector types in a risk category."""
    return [dtype for dtype, level in DETECTOR_RISK_LEVEL.items() if level == risk]


class Finding(BaseModel):
    """A single detected span of sensitive text."""

    model_config = ConfigDict(
        use_enum_values=True, alias_generator=to_camel, populate_by_name=True
    )

    type: DetectorType = Field(..., description="Category of the finding")

    # Raw match - internal only, kept out of repr so it never reaches a log line
    value: str = Field(..., repr=False, description="Matched text (never persist)")

    start: int = Field(..., ge=0, description="Start offset in the scanned text")
    end: int = Field(..., description="End offset (exclusive)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")
    context: Optional[str] = Field(None, repr=False, description="Surrounding snippet")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Issuer, entropy, ...")

    @model_validator(mode="after")
    def _check_span(self) -> "Finding":
        if self.end <= self.start:
            raise ValueError(f"finding end ({self.end}) must be after start ({self.start})")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Finding") -> bool:
        """True if the two spans share at least one character."""
        return self.start < other.end and other.start < self.end

    def to_safe_dict(self) -> dict:
        """Convert to a JSON-ready dictionary with the value masked."""
        from leak_checker.anonymizers.redactor import mask

        data = self.model_dump(by_alias=True, exclude={"context"})
        data["value"] = mask(self.value, self.type)
        return data


class DetectionSummary(BaseModel):
    """Summary statistics derived from the final findings list."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = Field(0)
    by_type: Dict[str, int] = Field(default_factory=dict)
    highest_confidence: float = Field(0.0, ge=0.0, le=1.0)

    @classmethod
    def from_findings(cls, findings: List[Finding]) -> "DetectionSummary":
        by_type: Dict[str, int] = {}
        highest = 0.0
        for finding in findings:
            by_type[finding.type] = by_type.get(finding.type, 0) + 1
            highest = max(highest, finding.confidence)
        return cls(total=len(findings), by_type=by_type, highest_confidence=highest)


class DetectionResult(BaseModel):
    """Result of one scan call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_sensitive_data: bool = Field(False)
    findings: List[Finding] = Field(default_factory=list)
    summary: DetectionSummary = Field(default_factory=DetectionSummary)
    scan_time: float = Field(0.0, description="Scan duration in milliseconds")
    text_length: int = Field(0)

    @classmethod
    def empty(cls, scan_time: float = 0.0, text_length: int = 0) -> "DetectionResult":
        """Result for input that was never scanned."""
        return cls(scan_time=scan_time, text_length=text_length)

    def findings_of_type(self, detector_type: DetectorType) -> List[Finding]:
        return [f for f in self.findings if f.type == detector_type]
