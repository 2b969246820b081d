"""Secret and PII detection engines."""

from .checksum import (
    ChecksumValidator,
    extract_credit_cards,
    identify_card_issuer,
    looks_like_credit_card,
    luhn_validate,
    mask_credit_card,
    validate_iban_checksum,
)
from .context import apply_context_boost
from .engine import apply_allowlist, deduplicate_findings, describe_finding, overlaps, quick_check, scan
from .entropy import calculate_entropy, calculate_sliding_entropy, find_high_entropy_regions, has_high_entropy
from .patterns import API_KEY_PATTERNS, PatternDefinition, scan_for_api_keys
from .pii import PIIValidator

__all__ = [
    "scan",
    "quick_check",
    "describe_finding",
    "apply_allowlist",
    "deduplicate_findings",
    "overlaps",
    "apply_context_boost",
    "API_KEY_PATTERNS",
    "PatternDefinition",
    "scan_for_api_keys",
    "PIIValidator",
    "ChecksumValidator",
    "luhn_validate",
    "validate_iban_checksum",
    "identify_card_issuer",
    "looks_like_credit_card",
    "mask_credit_card",
    "extract_credit_cards",
    "calculate_entropy",
    "calculate_sliding_entropy",
    "find_high_entropy_regions",
    "has_high_entropy",
]
