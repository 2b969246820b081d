"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
from pathlib import Path
from typing import Callable, Generator, Optional

from leak_checker.models import DetectorType, Finding
from leak_checker.models import config as config_module

OPENAI_KEY = "sk-proj-" + "a" * 49

# 62 distinct base62 characters plus two repeats, entropy ~5.94 bits/char
RANDOM_TOKEN = "a0B1c2D3e4F5g6H7i8J9kLmNoPqRsTuVwXyZAbCdEfGhIjKlMnOpQrStUvWxYzQ7"

VALID_CARD = "4532015112830366"
VALID_IBAN = "GB82WEST12345698765432"
REQUEST_UUID = "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_text_with_secrets() -> str:
    """Sample text containing a key, a card and an email address."""
    return (
        "Deploy notes\n"
        f"OPENAI={OPENAI_KEY}\n"
        f"Card on file {VALID_CARD}\n"
        "Reach me at john.doe@company.com\n"
    )


@pytest.fixture
def sample_text_clean() -> str:
    """Sample text without anything sensitive."""
    return (
        "The weather was mild and the meeting ran long.\n"
        "We agreed to move the launch to the second week of March.\n"
    )


@pytest.fixture
def sample_text_file(temp_dir: Path, sample_text_with_secrets: str) -> Path:
    """Create a text file containing secrets."""
    txt_path = temp_dir / "notes.txt"
    txt_path.write_text(sample_text_with_secrets)
    return txt_path


@pytest.fixture
def clean_text_file(temp_dir: Path, sample_text_clean: str) -> Path:
    """Create a text file with nothing sensitive."""
    txt_path = temp_dir / "clean.txt"
    txt_path.write_text(sample_text_clean)
    return txt_path


@pytest.fixture
def make_finding() -> Callable[..., Finding]:
    """Factory for findings located inside a given text."""

    def _make(
        text: str,
        value: str,
        detector_type: DetectorType = DetectorType.API_KEY_OPENAI,
        confidence: float = 0.9,
        start: Optional[int] = None,
    ) -> Finding:
        if start is None:
            start = text.index(value)
        return Finding(
            type=detector_type,
            value=value,
            start=start,
            end=start + len(value),
            confidence=confidence,
        )

    return _make


@pytest.fixture
def reset_settings(monkeypatch):
    """Drop the cached settings so environment changes are picked up."""
    monkeypatch.setattr(config_module, "settings", None)
    yield
