"""Detection engine.

Runs every enabled detector over a text, rescales confidence from context,
filters by threshold and resolves overlapping spans into a clean,
position-ordered list of findings.
"""

import re
import time
from typing import Any, Iterable, List, Optional

from leak_checker.detectors.checksum import extract_credit_cards
from leak_checker.detectors.context import apply_context_boost
from leak_checker.detectors.entropy import entropy_confidence, find_high_entropy_regions
from leak_checker.detectors.patterns import extract_context, scan_for_api_keys
from leak_checker.detectors.pii import (
    scan_for_emails,
    scan_for_iban,
    scan_for_uk_national_insurance,
    scan_for_uk_phones,
    scan_for_us_ssn,
)
from leak_checker.models import (
    DETECTOR_DESCRIPTIONS,
    ENTROPY_THRESHOLDS,
    DetectionResult,
    DetectionSummary,
    DetectorType,
    Finding,
    ScanOptions,
)
from leak_checker.utils import get_logger

logger = get_logger(__name__)

CARD_CONFIDENCE = 0.95

# Lenient signals for the pre-filter; never used for reporting
QUICK_CHECK_PATTERNS = (
    re.compile(r"sk-[a-zA-Z0-9_-]{5,}"),
    re.compile(r"AKIA[A-Z0-9]{5,}"),
    re.compile(r"ghp_[a-zA-Z0-9]{5,}"),
    re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"),
    re.compile(r"-----BEGIN.*PRIVATE KEY-----"),
    re.compile(r"\b[A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,253}\.[A-Za-z]{2,63}\b"),
)
QUICK_CHECK_ASSIGNMENT = re.compile(r"(?:password|passwd|pwd|secret|token|api_key|apikey|auth)\s*[:=]\s*", re.IGNORECASE)

QUICK_CHECK_MIN_LENGTH = 10


def overlaps(a: Finding, b: Finding) -> bool:
    """True if two findings share at least one character."""
    return a.start < b.end and b.start < a.end


def deduplicate_findings(findings: List[Finding]) -> List[Finding]:
    """
    Resolve overlapping spans.

    Findings are ordered by start, then by confidence descending, and each
    is kept only if it does not overlap one already kept.

    Args:
        findings: Findings that may overlap

    Returns:
        Non-overlapping findings
    """
    ordered = sorted(findings, key=lambda f: (f.start, -f.confidence))
    kept: List[Finding] = []

    for finding in ordered:
        if not any(overlaps(finding, other) for other in kept):
            kept.append(finding)

    return kept


def _collect_raw_findings(text: str, options: ScanOptions) -> List[Finding]:
    enabled = options.enabled_detectors
    context_size = options.context_size
    findings: List[Finding] = []

    findings.extend(scan_for_api_keys(text, enabled, context_size))

    if DetectorType.EMAIL in enabled:
        findings.extend(scan_for_emails(text, options.filter_domains, context_size))
    if DetectorType.PHONE_UK in enabled:
        findings.extend(scan_for_uk_phones(text, context_size))
    if DetectorType.UK_NI_NUMBER in enabled:
        findings.extend(scan_for_uk_national_insurance(text, context_size))
    if DetectorType.US_SSN in enabled:
        findings.extend(scan_for_us_ssn(text, context_size))
    if DetectorType.IBAN in enabled:
        findings.extend(scan_for_iban(text, context_size))

    if DetectorType.CREDIT_CARD in enabled:
        for card in extract_credit_cards(text):
            findings.append(
                Finding(
                    type=DetectorType.CREDIT_CARD,
                    value=card.value,
                    start=card.start,
                    end=card.end,
                    confidence=CARD_CONFIDENCE,
                    context=extract_context(text, card.start, card.end, context_size),
                    metadata={"issuer": card.issuer},
                )
            )

    # Earlier detectors claim their spans before the generic entropy pass
    if DetectorType.HIGH_ENTROPY in enabled:
        threshold = options.entropy_threshold(ENTROPY_THRESHOLDS)
        for region in find_high_entropy_regions(text, threshold, ENTROPY_THRESHOLDS):
            if any(region.start < f.end and f.start < region.end for f in findings):
                continue
            findings.append(
                Finding(
                    type=DetectorType.HIGH_ENTROPY,
                    value=region.value,
                    start=region.start,
                    end=region.end,
                    confidence=entropy_confidence(region.entropy, ENTROPY_THRESHOLDS),
                    context=extract_context(text, region.start, region.end, context_size),
                    metadata={"entropy": round(region.entropy, 3)},
                )
            )

    return findings


def scan(text: Any, options: Any = None, **overrides: Any) -> DetectionResult:
    """
    Scan text for secrets and personal data.

    Args:
        text: Text to scan; anything other than a non-blank string yields
            an empty result
        options: ScanOptions, a dict of options (snake_case or camelCase)
            or None for defaults
        **overrides: Individual options applied on top of `options`

    Returns:
        DetectionResult with non-overlapping findings ordered by position
    """
    started = time.perf_counter()

    if not isinstance(text, str) or not text.strip():
        text_length = len(text) if isinstance(text, str) else 0
        return DetectionResult.empty((time.perf_counter() - started) * 1000, text_length)

    scan_options = ScanOptions.from_any(options, **overrides)

    raw = _collect_raw_findings(text, scan_options)
    adjusted = apply_context_boost(text, raw)

    threshold = scan_options.confidence_threshold()
    confident = [f for f in adjusted if f.confidence >= threshold]

    findings = sorted(deduplicate_findings(confident), key=lambda f: f.start)
    findings = findings[: scan_options.max_results]

    if not scan_options.include_context:
        findings = [f.model_copy(update={"context": None}) for f in findings]

    scan_time = (time.perf_counter() - started) * 1000
    logger.debug(
        f"Scan of {len(text)} chars: {len(raw)} raw, {len(confident)} above {threshold}, "
        f"{len(findings)} reported in {scan_time:.2f}ms"
    )

    return DetectionResult(
        has_sensitive_data=bool(findings),
        findings=findings,
        summary=DetectionSummary.from_findings(findings),
        scan_time=scan_time,
        text_length=len(text),
    )


def quick_check(text: Any) -> bool:
    """
    Cheap pre-filter: False means the text is almost certainly clean.

    Args:
        text: Text to check

    Returns:
        True if the text might contain sensitive data
    """
    if not isinstance(text, str) or len(text) < QUICK_CHECK_MIN_LENGTH:
        return False

    if any(pattern.search(text) for pattern in QUICK_CHECK_PATTERNS):
        return True
    return QUICK_CHECK_ASSIGNMENT.search(text) is not None


def describe_finding(finding: Finding) -> str:
    """
    Human-readable description of a finding's type.

    Raises:
        KeyError: If the type has no description
    """
    return DETECTOR_DESCRIPTIONS[DetectorType(finding.type)]


def apply_allowlist(findings: Iterable[Finding], allowlist: Optional[Iterable[str]]) -> List[Finding]:
    """
    Drop findings whose raw value is allowlisted.

    The engine does not apply the allowlist itself; callers holding user
    settings use this after scan().

    Args:
        findings: Findings from scan()
        allowlist: Exact values to ignore

    Returns:
        Remaining findings
    """
    allowed = set(allowlist or [])
    if not allowed:
        return list(findings)
    return [f for f in findings if f.value not in allowed]


# camelCase aliases for hosts using the wire names
quickCheck = quick_check
describeFinding = describe_finding
