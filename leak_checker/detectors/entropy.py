"""Shannon entropy analysis for generic secret detection."""

import math
import re
from collections import Counter
from typing import List, NamedTuple

from leak_checker.models import ENTROPY_THRESHOLDS, EntropyThresholds

# Runs of characters that commonly make up tokens and keys
TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_\-+=/.]{16,}")


class EntropyRegion(NamedTuple):
    """A substring whose entropy cleared the threshold."""

    value: str
    start: int
    end: int
    entropy: float


class EntropyWindow(NamedTuple):
    start: int
    end: int
    entropy: float
    substring: str


def calculate_entropy(text: str) -> float:
    """
    Calculate Shannon entropy in bits per character.

    H = -sum(p(c) * log2(p(c))) over the character frequencies.

    Args:
        text: Input string

    Returns:
        0.0 for empty or single-symbol strings, up to log2(alphabet size)
    """
    if not text:
        return 0.0

    length = len(text)
    entropy = 0.0
    for count in Counter(text).values():
        probability = count / length
        entropy -= probability * math.log2(probability)
    return entropy


def calculate_sliding_entropy(text: str, window_size: int = 20) -> List[EntropyWindow]:
    """
    Entropy of every window of a fixed size.

    Args:
        text: Input text
        window_size: Window length

    Returns:
        One entry per window, or a single entry for text shorter than the window
    """
    if len(text) < window_size:
        return [EntropyWindow(0, len(text), calculate_entropy(text), text)]

    return [
        EntropyWindow(i, i + window_size, calculate_entropy(text[i : i + window_size]), text[i : i + window_size])
        for i in range(len(text) - window_size + 1)
    ]


def find_high_entropy_regions(
    text: str,
    threshold: float = ENTROPY_THRESHOLDS.likely,
    thresholds: EntropyThresholds = ENTROPY_THRESHOLDS,
) -> List[EntropyRegion]:
    """
    Find token-like substrings with entropy at or above a threshold.

    Candidates are runs of token characters, truncated to the maximum
    length; runs shorter than the minimum length are never considered.

    Args:
        text: Text to analyze
        threshold: Minimum entropy to report
        thresholds: Length window (min_length/max_length)

    Returns:
        High-entropy regions in order of appearance
    """
    regions: List[EntropyRegion] = []

    if len(text) < thresholds.min_length:
        return regions

    for match in TOKEN_PATTERN.finditer(text):
        candidate = match.group()[: thresholds.max_length]
        if len(candidate) < thresholds.min_length:
            continue

        entropy = calculate_entropy(candidate)
        if entropy >= threshold:
            regions.append(EntropyRegion(candidate, match.start(), match.start() + len(candidate), entropy))

    return regions


def has_high_entropy(text: str, threshold: float = ENTROPY_THRESHOLDS.suspicious) -> bool:
    """Cheap check on a sample taken a quarter of the way into the text."""
    if len(text) < 12:
        return False

    sample_start = len(text) // 4
    sample = text[sample_start : sample_start + 32]
    return calculate_entropy(sample) >= threshold


def entropy_confidence(entropy: float, thresholds: EntropyThresholds = ENTROPY_THRESHOLDS) -> float:
    """Map an entropy value to a finding confidence."""
    if entropy >= thresholds.definite:
        return 0.9
    if entropy >= thresholds.likely:
        return 0.75
    if entropy >= thresholds.suspicious:
        return 0.6
    return 0.4
