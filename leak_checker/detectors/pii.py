"""Personal and financial identifier detection with validation.

Covers email addresses, UK phone numbers, UK National Insurance numbers,
US Social Security numbers and IBANs. Each scanner pairs a shape regex
with a validator and reports a fixed base confidence.
"""

import re
from typing import Iterable, List, Optional, Set

from leak_checker.detectors.checksum import validate_iban_checksum
from leak_checker.detectors.patterns import extract_context
from leak_checker.models import DEFAULT_CONTEXT_SIZE, DetectorType, Finding
from leak_checker.utils import get_logger

logger = get_logger(__name__)

# Local part and domain bounded to RFC 5321 lengths
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,253}\.[A-Za-z]{2,63}\b")

UK_PHONE_PATTERNS = (
    # International: +44 7911 123456, +44 (0) 161 496 0000
    re.compile(r"\+44[ \t]{0,2}(?:\(0\)[ \t]{0,2}|0[ \t]?)?[1-9]\d{2,3}[\s.-]?\d{3,4}[\s.-]?\d{3,4}"),
    # Mobile: 07911 123456
    re.compile(r"\b07\d{2,3}[\s.-]?\d{3}[\s.-]?\d{3,4}"),
    # Landline: 020 7946 0958, 0161 496 0000
    re.compile(r"\b0[12]\d{1,3}[\s.-]?\d{3,4}[\s.-]?\d{3,4}"),
)

UK_NI_PATTERN = re.compile(
    r"\b[A-CEGHJ-PR-TW-Z][A-CEGHJ-NPR-TW-Z]\s?\d{2}\s?\d{2}\s?\d{2}\s?[A-D]\b",
    re.IGNORECASE,
)

US_SSN_PATTERN = re.compile(r"\b(?!000|666|9\d{2})\d{3}[-\s]?(?!00)\d{2}[-\s]?(?!0000)\d{4}\b")

IBAN_PATTERN = re.compile(r"\b[A-Z]{2}\d{2}\s?(?:[A-Z0-9]{4}\s?){2,7}[A-Z0-9]{1,4}\b", re.IGNORECASE)

# Role accounts rather than people
GENERIC_EMAIL_PREFIXES = (
    "noreply",
    "no-reply",
    "donotreply",
    "do-not-reply",
    "info",
    "support",
    "help",
    "admin",
    "webmaster",
    "sales",
    "marketing",
    "contact",
    "hello",
    "hi",
    "team",
    "example",
    "test",
    "demo",
)

PERSONAL_EMAIL_DOMAINS = (
    "gmail.com",
    "yahoo.com",
    "hotmail.com",
    "outlook.com",
    "icloud.com",
    "protonmail.com",
)

# Published specimen numbers
PLACEHOLDER_NI_NUMBERS = {"QQ123456A", "AA000000A"}
PLACEHOLDER_SSNS = {"123456789", "111111111", "999999999", "987654321"}

EMAIL_CONFIDENCE_PERSONAL = 0.85
EMAIL_CONFIDENCE_UK = 0.75
EMAIL_CONFIDENCE_DEFAULT = 0.65
PHONE_CONFIDENCE = 0.8
NI_CONFIDENCE = 0.85
SSN_CONFIDENCE = 0.75
IBAN_CONFIDENCE = 0.9


class PIIValidator:
    """Format validators for personal identifiers."""

    @staticmethod
    def is_generic_email(email: str) -> bool:
        local = email.split("@", 1)[0].lower()
        return any(local.startswith(prefix) for prefix in GENERIC_EMAIL_PREFIXES)

    @staticmethod
    def email_confidence(email: str) -> float:
        """
        Confidence tier for an email address by domain class.

        Args:
            email: Email address

        Returns:
            0.85 for personal webmail, 0.75 for .co.uk, 0.65 otherwise
        """
        domain = email.rsplit("@", 1)[-1].lower()
        if domain in PERSONAL_EMAIL_DOMAINS:
            return EMAIL_CONFIDENCE_PERSONAL
        if domain.endswith(".co.uk"):
            return EMAIL_CONFIDENCE_UK
        return EMAIL_CONFIDENCE_DEFAULT

    @staticmethod
    def validate_uk_phone(phone: str) -> bool:
        """
        Validate a UK phone number candidate.

        Args:
            phone: Candidate with any separators

        Returns:
            True if digit count and prefix are plausible
        """
        digits = re.sub(r"\D", "", phone)

        if not 10 <= len(digits) <= 13:
            return False

        if digits.startswith("44"):
            national = digits[2:].lstrip("0")
            return re.match(r"[1-9]", national) is not None

        if digits.startswith("0"):
            # 01/02 landline, 03 non-geographic, 07 mobile
            return re.match(r"0[1237]", digits) is not None

        return False

    @staticmethod
    def validate_uk_ni(ni_number: str) -> bool:
        """
        Validate a UK National Insurance number.

        Args:
            ni_number: Candidate, spaces allowed

        Returns:
            True if the prefix letters are allowed and it is not a specimen
        """
        normalized = re.sub(r"\s", "", ni_number).upper()

        if len(normalized) != 9:
            return False
        if normalized[0] in "DFIQUV":
            return False
        if normalized[1] in "DFIOQUV":
            return False
        return normalized not in PLACEHOLDER_NI_NUMBERS

    @staticmethod
    def validate_us_ssn(ssn: str) -> bool:
        """Reject specimen and repeated-digit SSNs."""
        digits = re.sub(r"\D", "", ssn)

        if len(digits) != 9:
            return False
        if digits in PLACEHOLDER_SSNS:
            return False
        return len(set(digits)) > 1


def _build_finding(
    text: str,
    detector_type: DetectorType,
    value: str,
    start: int,
    end: int,
    confidence: float,
    context_size: int,
    metadata: Optional[dict] = None,
) -> Finding:
    logger.debug(f"Detected {detector_type.value} at {start}-{end} (confidence: {confidence})")
    return Finding(
        type=detector_type,
        value=value,
        start=start,
        end=end,
        confidence=confidence,
        context=extract_context(text, start, end, context_size),
        metadata=metadata,
    )


def scan_for_emails(
    text: str,
    filter_domains: Optional[Iterable[str]] = None,
    context_size: int = DEFAULT_CONTEXT_SIZE,
) -> List[Finding]:
    """
    Find personal email addresses.

    Args:
        text: Text to scan
        filter_domains: Domains whose addresses are never reported
        context_size: Characters of context on each side

    Returns:
        Email findings
    """
    domains = [d.lower() for d in filter_domains or []]
    findings: List[Finding] = []

    if "@" not in text:
        return findings

    for match in EMAIL_PATTERN.finditer(text):
        email = match.group(0)
        email_domain = email.rsplit("@", 1)[-1].lower()

        if any(email_domain.endswith(domain) for domain in domains):
            continue
        if PIIValidator.is_generic_email(email):
            continue

        findings.append(
            _build_finding(
                text,
                DetectorType.EMAIL,
                email,
                match.start(),
                match.end(),
                PIIValidator.email_confidence(email),
                context_size,
            )
        )

    return findings


def scan_for_uk_phones(text: str, context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Finding]:
    """Find UK phone numbers in any of the international, mobile or landline shapes."""
    findings: List[Finding] = []
    seen: Set[int] = set()

    for pattern in UK_PHONE_PATTERNS:
        for match in pattern.finditer(text):
            if match.start() in seen:
                continue
            if not PIIValidator.validate_uk_phone(match.group(0)):
                continue

            seen.add(match.start())
            findings.append(
                _build_finding(
                    text,
                    DetectorType.PHONE_UK,
                    match.group(0),
                    match.start(),
                    match.end(),
                    PHONE_CONFIDENCE,
                    context_size,
                )
            )

    return findings


def scan_for_uk_national_insurance(text: str, context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Finding]:
    """
    Find UK National Insurance numbers.

    The reported value is normalized (no spaces, upper case); the span
    still covers the original text.
    """
    findings: List[Finding] = []

    for match in UK_NI_PATTERN.finditer(text):
        if not PIIValidator.validate_uk_ni(match.group(0)):
            continue

        normalized = re.sub(r"\s", "", match.group(0)).upper()
        findings.append(
            _build_finding(
                text,
                DetectorType.UK_NI_NUMBER,
                normalized,
                match.start(),
                match.end(),
                NI_CONFIDENCE,
                context_size,
            )
        )

    return findings


def scan_for_us_ssn(text: str, context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Finding]:
    findings: List[Finding] = []

    for match in US_SSN_PATTERN.finditer(text):
        if not PIIValidator.validate_us_ssn(match.group(0)):
            continue

        findings.append(
            _build_finding(
                text,
                DetectorType.US_SSN,
                match.group(0),
                match.start(),
                match.end(),
                SSN_CONFIDENCE,
                context_size,
            )
        )

    return findings


def scan_for_iban(text: str, context_size: int = DEFAULT_CONTEXT_SIZE) -> List[Finding]:
    """
    Find IBANs that pass the mod-97 checksum.

    The value is the matched text as written; the compact upper-case form
    is kept in metadata["normalized"].
    """
    findings: List[Finding] = []

    for match in IBAN_PATTERN.finditer(text):
        normalized = re.sub(r"\s", "", match.group(0)).upper()
        if not validate_iban_checksum(normalized):
            continue

        findings.append(
            _build_finding(
                text,
                DetectorType.IBAN,
                match.group(0),
                match.start(),
                match.end(),
                IBAN_CONFIDENCE,
                context_size,
                metadata={"normalized": normalized},
            )
        )

    return findings
