"""Confidence adjustment from keywords surrounding a finding."""

from typing import List, Sequence

from leak_checker.detectors.patterns import CONTEXT_BOOST_KEYWORDS, CONTEXT_REDUCE_KEYWORDS
from leak_checker.models import Finding

CONTEXT_WINDOW = 100
BOOST_STEP = 0.05
REDUCE_STEP = 0.15


def _count_keywords(window: str, keywords: Sequence[str]) -> int:
    return sum(1 for keyword in keywords if keyword in window)


def context_adjustment(text: str, start: int, end: int, window: int = CONTEXT_WINDOW) -> float:
    """
    Confidence delta for a span from nearby boost and reduce keywords.

    Each boost keyword present in the window adds 0.05, each reduce
    keyword subtracts 0.15.

    Args:
        text: Full scanned text
        start: Span start
        end: Span end
        window: Characters examined on each side of the span

    Returns:
        Unclamped confidence delta
    """
    surrounding = text[max(0, start - window) : min(len(text), end + window)].lower()
    boosts = _count_keywords(surrounding, CONTEXT_BOOST_KEYWORDS)
    reductions = _count_keywords(surrounding, CONTEXT_REDUCE_KEYWORDS)
    return boosts * BOOST_STEP - reductions * REDUCE_STEP


def apply_context_boost(text: str, findings: List[Finding]) -> List[Finding]:
    """
    Rescale every finding's confidence from its surroundings.

    Spans are unchanged; confidence is clamped to [0, 1].

    Args:
        text: Full scanned text
        findings: Raw findings

    Returns:
        New findings with adjusted confidence
    """
    adjusted: List[Finding] = []
    for finding in findings:
        delta = context_adjustment(text, finding.start, finding.end)
        confidence = min(1.0, max(0.0, finding.confidence + delta))
        adjusted.append(finding.model_copy(update={"confidence": confidence}))
    return adjusted
