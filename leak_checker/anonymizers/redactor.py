"""Redaction and masking of detected values."""

import hashlib
import re
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from leak_checker.detectors.checksum import mask_credit_card
from leak_checker.models import DETECTOR_LABELS, DetectorType, Finding
from leak_checker.utils import get_logger

logger = get_logger(__name__)


class RedactionStyle(str, Enum):
    """How a finding's span is replaced in redacted text."""

    MARKER = "marker"  # [REDACTED_OPENAI_KEY]
    MASK = "mask"  # sk-p************aaaa
    REMOVE = "remove"  # Remove entirely
    HASH = "hash"  # [API_KEY_OPENAI:1a2b3c4d]


class MarkerFormat(str, Enum):
    """Display formats for markers shown by UI layers."""

    BRACKET = "bracket"
    ASTERISK = "asterisk"
    PLACEHOLDER = "placeholder"


DEFAULT_MARKER = "[REDACTED]"

REDACTION_MARKERS: Dict[DetectorType, str] = {
    DetectorType.API_KEY_OPENAI: "[REDACTED_OPENAI_KEY]",
    DetectorType.API_KEY_AWS: "[REDACTED_AWS_KEY]",
    DetectorType.API_KEY_GITHUB: "[REDACTED_GITHUB_TOKEN]",
    DetectorType.API_KEY_STRIPE: "[REDACTED_STRIPE_KEY]",
    DetectorType.API_KEY_SLACK: "[REDACTED_SLACK_TOKEN]",
    DetectorType.API_KEY_GOOGLE: "[REDACTED_GOOGLE_KEY]",
    DetectorType.API_KEY_ANTHROPIC: "[REDACTED_ANTHROPIC_KEY]",
    DetectorType.API_KEY_SENDGRID: "[REDACTED_SENDGRID_KEY]",
    DetectorType.API_KEY_TWILIO: "[REDACTED_TWILIO_KEY]",
    DetectorType.API_KEY_MAILCHIMP: "[REDACTED_MAILCHIMP_KEY]",
    DetectorType.API_KEY_HEROKU: "[REDACTED_HEROKU_KEY]",
    DetectorType.API_KEY_NPM: "[REDACTED_NPM_TOKEN]",
    DetectorType.API_KEY_PYPI: "[REDACTED_PYPI_TOKEN]",
    DetectorType.API_KEY_DOCKER: "[REDACTED_DOCKER_TOKEN]",
    DetectorType.API_KEY_SUPABASE: "[REDACTED_SUPABASE_KEY]",
    DetectorType.API_KEY_FIREBASE: "[REDACTED_FIREBASE_KEY]",
    DetectorType.API_KEY_GENERIC: "[REDACTED_API_KEY]",
    DetectorType.PRIVATE_KEY: "[REDACTED_PRIVATE_KEY]",
    DetectorType.PASSWORD: "[REDACTED_PASSWORD]",
    DetectorType.CREDIT_CARD: "[REDACTED_CARD]",
    DetectorType.IBAN: "[REDACTED_IBAN]",
    DetectorType.EMAIL: "[REDACTED_EMAIL]",
    DetectorType.PHONE_UK: "[REDACTED_PHONE]",
    DetectorType.UK_NI_NUMBER: "[REDACTED_NI_NUMBER]",
    DetectorType.US_SSN: "[REDACTED_SSN]",
    DetectorType.HIGH_ENTROPY: "[REDACTED_SECRET]",
}

REDACTION_FORMATS: Dict[MarkerFormat, Callable[[DetectorType], str]] = {
    MarkerFormat.BRACKET: lambda dtype: f"[REDACTED_{dtype.value.upper()}]",
    MarkerFormat.ASTERISK: lambda dtype: f"***{DETECTOR_LABELS[dtype]}***",
    MarkerFormat.PLACEHOLDER: lambda dtype: "████████",
}

_GENERIC_PREFIX = re.compile(r"^([a-zA-Z]{2,4}[-_])")


def _mask_email(email: str) -> str:
    """john.doe@company.com -> jo***@***.com"""
    parts = email.split("@")
    if len(parts) != 2 or "." not in parts[1]:
        return "***@***.***"

    local, domain = parts
    masked_local = local[:2] + "***" if len(local) > 2 else "***"
    return f"{masked_local}@***.{domain.rsplit('.', 1)[-1]}"


def _mask_phone(phone: str) -> str:
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]


def _mask_national_id(value: str) -> str:
    compact = re.sub(r"\s", "", value)
    if len(compact) < 3:
        return "*" * len(compact)
    return "*" * (len(compact) - 2) + compact[-2:]


def _mask_iban(iban: str) -> str:
    compact = re.sub(r"\s", "", iban)
    if len(compact) < 6:
        return "*" * len(compact)
    return compact[:2] + "*" * (len(compact) - 6) + compact[-4:]


def _mask_generic(value: str) -> str:
    if len(value) < 8:
        return "*" * len(value)

    prefix_match = _GENERIC_PREFIX.match(value)
    if prefix_match:
        prefix = prefix_match.group(1)
        rest = value[len(prefix) :]
        return prefix + "*" * max(0, len(rest) - 4) + rest[-4:]

    return value[:4] + "*" * (len(value) - 8) + value[-4:]


def mask(value: str, detector_type: Union[DetectorType, str]) -> str:
    """
    Mask a value for display, keeping only a short prefix or suffix.

    Args:
        value: Raw detected value
        detector_type: Type of the finding

    Returns:
        Masked string that cannot be reversed to the value
    """
    dtype = DetectorType(detector_type)

    if dtype == DetectorType.EMAIL:
        return _mask_email(value)
    if dtype == DetectorType.CREDIT_CARD:
        return mask_credit_card(value)
    if dtype == DetectorType.PHONE_UK:
        return _mask_phone(value)
    if dtype in (DetectorType.UK_NI_NUMBER, DetectorType.US_SSN):
        return _mask_national_id(value)
    if dtype == DetectorType.IBAN:
        return _mask_iban(value)
    if dtype == DetectorType.PRIVATE_KEY:
        return "[PRIVATE_KEY]"
    return _mask_generic(value)


def get_marker(detector_type: Union[DetectorType, str], marker_format: Optional[Union[MarkerFormat, str]] = None) -> str:
    """
    Marker text for a detector type.

    Args:
        detector_type: Type of the finding
        marker_format: Display format; None uses the per-type markers

    Returns:
        Marker string
    """
    dtype = DetectorType(detector_type)
    if marker_format is None:
        return REDACTION_MARKERS.get(dtype, DEFAULT_MARKER)
    return REDACTION_FORMATS[MarkerFormat(marker_format)](dtype)


class RedactionEngine:
    """Replaces finding spans in text."""

    def __init__(
        self,
        default_style: RedactionStyle = RedactionStyle.MARKER,
        marker_format: Optional[MarkerFormat] = None,
    ):
        """
        Initialize redaction engine.

        Args:
            default_style: Style used when redact_text gets none
            marker_format: Marker display format for the marker style
        """
        self.default_style = RedactionStyle(default_style)
        self.marker_format = MarkerFormat(marker_format) if marker_format is not None else None

    def redact_text(
        self,
        text: str,
        findings: Iterable[Finding],
        style: Optional[RedactionStyle] = None,
    ) -> str:
        """
        Replace every finding's span, leaving other text untouched.

        Findings outside the text or overlapping an earlier span are skipped.

        Args:
            text: Original text
            findings: Findings whose spans index into text
            style: Redaction style (uses default if None)

        Returns:
            Redacted text
        """
        style = RedactionStyle(style) if style is not None else self.default_style
        ordered = sorted(findings, key=lambda f: (f.start, f.end))
        if not ordered:
            return text

        parts: List[str] = []
        cursor = 0
        for finding in ordered:
            if finding.end > len(text):
                logger.warning(f"Skipping {finding.type} span {finding.start}-{finding.end} outside text")
                continue
            if finding.start < cursor:
                logger.warning(f"Skipping overlapping {finding.type} span {finding.start}-{finding.end}")
                continue

            parts.append(text[cursor : finding.start])
            parts.append(self._apply_style(finding, style))
            cursor = finding.end

        parts.append(text[cursor:])
        return "".join(parts)

    def _apply_style(self, finding: Finding, style: RedactionStyle) -> str:
        if style == RedactionStyle.MASK:
            return mask(finding.value, finding.type)
        elif style == RedactionStyle.REMOVE:
            return ""
        elif style == RedactionStyle.HASH:
            return self._hash_value(finding)
        else:
            return get_marker(finding.type, self.marker_format)

    def _hash_value(self, finding: Finding) -> str:
        """
        Short SHA-256 tag for a value.

        Returns:
            "[<TYPE>:<first 8 hex chars>]"
        """
        hashed = hashlib.sha256(finding.value.encode()).hexdigest()
        return f"[{DetectorType(finding.type).value.upper()}:{hashed[:8]}]"

    def create_redaction_map(self, findings: Iterable[Finding]) -> Dict[str, str]:
        """
        Map each marker to the original value, for in-memory restore only.

        Later findings of the same type overwrite earlier ones.

        Args:
            findings: Findings to map

        Returns:
            Mapping dictionary
        """
        return {get_marker(f.type, self.marker_format): f.value for f in findings}


def redact(
    text: str,
    findings: Iterable[Finding],
    style: RedactionStyle = RedactionStyle.MARKER,
    marker_format: Optional[MarkerFormat] = None,
) -> str:
    """Replace every finding's span in text with its redaction."""
    return RedactionEngine(style, marker_format).redact_text(text, findings)


def create_redaction_map(findings: Iterable[Finding], marker_format: Optional[MarkerFormat] = None) -> Dict[str, str]:
    """Map each finding's marker to its original value."""
    return RedactionEngine(marker_format=marker_format).create_redaction_map(findings)
