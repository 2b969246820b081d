"""Provider API key and secret pattern detection.

The registry is an ordered table, most specific signatures first, so that
overlap resolution later sees the precise match before the generic one.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Set, Tuple

from leak_checker.models import DEFAULT_CONTEXT_SIZE, DetectorType, Finding
from leak_checker.utils import get_logger

logger = get_logger(__name__)

# Keywords near a match that suggest a real secret (+0.05 each)
CONTEXT_BOOST_KEYWORDS: Tuple[str, ...] = (
    "api_key",
    "apikey",
    "api-key",
    "secret",
    "token",
    "password",
    "passwd",
    "pwd",
    "credential",
    "auth",
    "authorization",
    "private",
    "access_key",
    "secret_key",
    "bearer",
    "oauth",
    "jwt",
    "connection_string",
    "conn_str",
    "database_url",
    "db_url",
)

# Keywords near a match that suggest an example or placeholder (-0.15 each)
CONTEXT_REDUCE_KEYWORDS: Tuple[str, ...] = (
    "example",
    "sample",
    "test",
    "demo",
    "fake",
    "dummy",
    "placeholder",
    "your_",
    "xxx",
    "redacted",
    "documentation",
    "docs",
    "readme",
)

PLACEHOLDER_MARKERS: Tuple[str, ...] = ("your_", "xxx", "placeholder", "example", "changeme", "<", "${")


@dataclass(frozen=True)
class PatternDefinition:
    """One entry of the pattern registry."""

    type: DetectorType
    pattern: re.Pattern
    base_confidence: float
    validate: Optional[Callable[[str], bool]] = None
    context_keywords: Tuple[str, ...] = field(default_factory=tuple)


def _is_long_enough(value: str) -> bool:
    return len(value) >= 20


def _has_mixed_case_and_symbol(value: str) -> bool:
    # AWS secrets are base64-ish; plain hex or lowercase runs are not
    return (
        re.search(r"[a-z]", value) is not None
        and re.search(r"[A-Z]", value) is not None
        and re.search(r"[/+=]", value) is not None
    )


def _is_long_jwt(value: str) -> bool:
    return len(value) > 100


def _is_not_placeholder(value: str) -> bool:
    lowered = value.lower()
    return not any(marker in lowered for marker in PLACEHOLDER_MARKERS)


API_KEY_PATTERNS: Tuple[PatternDefinition, ...] = (
    # OpenAI
    PatternDefinition(
        DetectorType.API_KEY_OPENAI,
        re.compile(r"\bsk-(?:proj-|admin-)?[A-Za-z0-9_-]+\b"),
        0.95,
        _is_long_enough,
        ("openai", "gpt", "chatgpt", "api_key", "openai_api_key"),
    ),
    # AWS access key id
    PatternDefinition(
        DetectorType.API_KEY_AWS,
        re.compile(r"\b(?:A3T[A-Z0-9]|AKIA|ABIA|ACCA|AGPA|AIDA|AIPA|ANPA|ANVA|APKA|AROA|ASCA|ASIA)[A-Z0-9]{16}\b"),
        0.95,
        None,
        ("aws", "amazon", "access_key", "aws_access_key_id", "s3", "ec2"),
    ),
    # AWS secret access key
    PatternDefinition(
        DetectorType.API_KEY_AWS,
        re.compile(r"\b[A-Za-z0-9/+=]{40}\b"),
        0.5,
        _has_mixed_case_and_symbol,
        ("aws", "secret_access_key", "aws_secret_access_key", "amazon"),
    ),
    # GitHub
    PatternDefinition(
        DetectorType.API_KEY_GITHUB,
        re.compile(r"\bghp_[A-Za-z0-9]{36}\b"),
        0.98,
        None,
        ("github", "git", "token", "github_token"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_GITHUB,
        re.compile(r"\bgithub_pat_[A-Za-z0-9_-]{50,}\b"),
        0.98,
        None,
        ("github", "pat", "token"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_GITHUB,
        re.compile(r"\bgho_[A-Za-z0-9]{36}\b"),
        0.98,
        None,
        ("github", "oauth", "token"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_GITHUB,
        re.compile(r"\b(?:ghu|ghs)_[A-Za-z0-9]{36}\b"),
        0.98,
        None,
        ("github", "app", "token"),
    ),
    # Stripe
    PatternDefinition(
        DetectorType.API_KEY_STRIPE,
        re.compile(r"\b(?:sk|pk|rk)_(?:test|live)_[A-Za-z0-9]{24,}\b"),
        0.98,
        None,
        ("stripe", "payment", "api_key", "stripe_secret_key"),
    ),
    # Slack
    PatternDefinition(
        DetectorType.API_KEY_SLACK,
        re.compile(r"\bxoxb-[0-9]{10,13}-[0-9]{10,13}-[A-Za-z0-9]{24}\b"),
        0.98,
        None,
        ("slack", "bot", "token", "slack_bot_token"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_SLACK,
        re.compile(r"\bxoxp-[0-9]{10,13}-[0-9]{10,13}-[0-9]{10,13}-[A-Za-z0-9]{32}\b"),
        0.98,
        None,
        ("slack", "user", "token"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_SLACK,
        re.compile(r"\bxapp-[0-9]+-[A-Za-z0-9]+-[0-9]+-[A-Za-z0-9]+\b"),
        0.98,
        None,
        ("slack", "app", "token"),
    ),
    # Google
    PatternDefinition(
        DetectorType.API_KEY_GOOGLE,
        re.compile(r"\bAIza[A-Za-z0-9_-]{35}\b"),
        0.95,
        None,
        ("google", "gcp", "api_key", "google_api_key"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_GOOGLE,
        re.compile(r"\bGOCspx-[A-Za-z0-9_-]{24,}\b"),
        0.98,
        None,
        ("google", "oauth", "client_secret"),
    ),
    # Anthropic
    PatternDefinition(
        DetectorType.API_KEY_ANTHROPIC,
        re.compile(r"\bsk-ant-api[0-9]{2}-[A-Za-z0-9_-]{93}\b"),
        0.98,
        None,
        ("anthropic", "claude", "api_key", "anthropic_api_key"),
    ),
    # SendGrid
    PatternDefinition(
        DetectorType.API_KEY_SENDGRID,
        re.compile(r"\bSG\.[A-Za-z0-9_-]{22}\.[A-Za-z0-9_-]{43}\b"),
        0.98,
        None,
        ("sendgrid", "email", "sendgrid_api_key"),
    ),
    # Twilio
    PatternDefinition(
        DetectorType.API_KEY_TWILIO,
        re.compile(r"\bSK[A-Za-z0-9]{32}\b"),
        0.9,
        None,
        ("twilio", "sms", "twilio_api_key"),
    ),
    PatternDefinition(
        DetectorType.API_KEY_TWILIO,
        re.compile(r"\bAC[A-Za-z0-9]{32}\b"),
        0.9,
        None,
        ("twilio", "account", "twilio_account_sid"),
    ),
    # Mailchimp
    PatternDefinition(
        DetectorType.API_KEY_MAILCHIMP,
        re.compile(r"\b[A-Za-z0-9]{32}-us[0-9]{1,2}\b"),
        0.85,
        None,
        ("mailchimp", "email", "mailchimp_api_key"),
    ),
    # Heroku keys are bare UUIDs, so confidence stays low without context
    PatternDefinition(
        DetectorType.API_KEY_HEROKU,
        re.compile(r"\b[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\b"),
        0.4,
        None,
        ("heroku", "heroku_api_key"),
    ),
    # npm
    PatternDefinition(
        DetectorType.API_KEY_NPM,
        re.compile(r"\bnpm_[A-Za-z0-9]{36}\b"),
        0.98,
        None,
        ("npm", "npmrc", "npm_token"),
    ),
    # PyPI
    PatternDefinition(
        DetectorType.API_KEY_PYPI,
        re.compile(r"\bpypi-[A-Za-z0-9_-]{50,}\b"),
        0.98,
        None,
        ("pypi", "pip", "pypi_token"),
    ),
    # Docker Hub
    PatternDefinition(
        DetectorType.API_KEY_DOCKER,
        re.compile(r"\bdckr_pat_[A-Za-z0-9_-]{27}\b"),
        0.98,
        None,
        ("docker", "docker_token"),
    ),
    # Supabase (JWT)
    PatternDefinition(
        DetectorType.API_KEY_SUPABASE,
        re.compile(r"\beyJ[A-Za-z0-9_-]*\.eyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]*"),
        0.7,
        _is_long_jwt,
        ("supabase", "supabase_key", "anon", "service_role"),
    ),
    # Firebase uses the Google key format
    PatternDefinition(
        DetectorType.API_KEY_FIREBASE,
        re.compile(r"\bAIza[A-Za-z0-9_-]{35}\b"),
        0.85,
        None,
        ("firebase", "firestore", "firebase_api_key"),
    ),
    # PEM private keys
    PatternDefinition(
        DetectorType.PRIVATE_KEY,
        re.compile(
            r"-----BEGIN (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----[\s\S]*?"
            r"-----END (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----"
        ),
        0.99,
        None,
        ("private", "key", "pem", "ssh"),
    ),
    # Assignments like password=..., token: ...
    PatternDefinition(
        DetectorType.PASSWORD,
        re.compile(
            r"(?:password|passwd|pwd|secret|token|api_key|apikey|auth)\s*[:=]\s*['\"]?([^'\"\s]{8,})['\"]?",
            re.IGNORECASE,
        ),
        0.6,
        _is_not_placeholder,
        (),
    ),
)


def extract_context(text: str, start: int, end: int, size: int = DEFAULT_CONTEXT_SIZE) -> str:
    """Snippet of up to `size` characters on each side of a span."""
    return text[max(0, start - size) : min(len(text), end + size)]


def get_patterns_for_type(detector_type: DetectorType) -> List[PatternDefinition]:
    """All registry entries reporting a given type."""
    return [definition for definition in API_KEY_PATTERNS if definition.type == detector_type]


def get_supported_types() -> List[DetectorType]:
    """Detector types covered by the pattern registry, in registry order."""
    types: List[DetectorType] = []
    for definition in API_KEY_PATTERNS:
        if definition.type not in types:
            types.append(definition.type)
    return types


def scan_for_api_keys(
    text: str,
    enabled_types: Optional[Iterable[DetectorType]] = None,
    context_size: int = DEFAULT_CONTEXT_SIZE,
    patterns: Tuple[PatternDefinition, ...] = API_KEY_PATTERNS,
) -> List[Finding]:
    """
    Scan text for provider API keys, private keys and password assignments.

    Args:
        text: Text to scan
        enabled_types: Detector types to run (default: all)
        context_size: Characters of context kept on each side of a match
        patterns: Pattern registry to evaluate

    Returns:
        Raw findings in registry order
    """
    enabled: Optional[Set[DetectorType]] = None
    if enabled_types is not None:
        enabled = {DetectorType(t) for t in enabled_types}

    findings: List[Finding] = []
    seen: Set[Tuple[str, int, str]] = set()

    for definition in patterns:
        if enabled is not None and definition.type not in enabled:
            continue

        for match in definition.pattern.finditer(text):
            value = match.group(0)
            key = (definition.type.value, match.start(), value)
            if key in seen:
                continue

            try:
                if definition.validate is not None and not definition.validate(value):
                    continue
            except Exception as e:
                logger.warning(f"Validator for {definition.type.value} failed at offset {match.start()}: {e}")
                continue

            seen.add(key)
            context = extract_context(text, match.start(), match.end(), context_size)
            lowered = context.lower()
            metadata = None
            keywords = [kw for kw in definition.context_keywords if kw in lowered]
            if keywords:
                metadata = {"keywords": keywords}

            findings.append(
                Finding(
                    type=definition.type,
                    value=value,
                    start=match.start(),
                    end=match.end(),
                    confidence=definition.base_confidence,
                    context=context,
                    metadata=metadata,
                )
            )
            logger.debug(
                f"Detected {definition.type.value} at {match.start()}-{match.end()} "
                f"(confidence: {definition.base_confidence})"
            )

    return findings
