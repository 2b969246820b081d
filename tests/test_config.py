"""Tests for scan options and settings."""

import pytest
from leak_checker.models import (
    DetectorType,
    ScanOptions,
    SensitivityLevel,
    Settings,
    get_settings,
)


class TestScanOptionsDefaults:
    """Test default option values."""

    def test_defaults(self):
        """Test every default."""
        options = ScanOptions()

        assert options.enabled_detectors == set(DetectorType)
        assert options.sensitivity_level == SensitivityLevel.MEDIUM
        assert options.max_results == 50
        assert options.include_context is True
        assert options.context_size == 50
        assert options.filter_domains == []
        assert options.min_confidence is None
        assert options.allowlist == []

    @pytest.mark.parametrize("level,threshold", [("low", 0.8), ("medium", 0.6), ("high", 0.4)])
    def test_confidence_threshold(self, level, threshold):
        """Test the sensitivity table."""
        assert ScanOptions(sensitivity_level=level).confidence_threshold() == threshold

    def test_min_confidence_overrides_table(self):
        """Test the explicit threshold."""
        assert ScanOptions(sensitivity_level="low", min_confidence=0.3).confidence_threshold() == 0.3

    @pytest.mark.parametrize("level,threshold", [("low", 4.5), ("medium", 4.0), ("high", 3.5)])
    def test_entropy_threshold(self, level, threshold):
        """Test the sensitivity to entropy mapping."""
        assert ScanOptions(sensitivity_level=level).entropy_threshold() == threshold


class TestScanOptionsNormalization:
    """Test that malformed options never raise."""

    def test_detector_list(self):
        """Test a list of names."""
        options = ScanOptions(enabled_detectors=["email", "credit_card"])

        assert options.enabled_detectors == {DetectorType.EMAIL, DetectorType.CREDIT_CARD}

    def test_detector_mapping(self):
        """Test the type to bool mapping."""
        options = ScanOptions(enabled_detectors={"email": True, "iban": False})

        assert options.enabled_detectors == {DetectorType.EMAIL}

    def test_unknown_detector_dropped(self):
        """Test that unknown names are ignored."""
        options = ScanOptions(enabled_detectors=["email", "bitcoin_wallet"])

        assert options.enabled_detectors == {DetectorType.EMAIL}

    def test_non_iterable_detectors(self):
        """Test that garbage enables everything."""
        assert ScanOptions(enabled_detectors=42).enabled_detectors == set(DetectorType)

    def test_unknown_sensitivity(self):
        """Test the medium fallback."""
        assert ScanOptions(sensitivity_level="paranoid").sensitivity_level == SensitivityLevel.MEDIUM
        assert ScanOptions(sensitivity_level=None).sensitivity_level == SensitivityLevel.MEDIUM

    def test_sensitivity_case_insensitive(self):
        """Test upper-case level names."""
        assert ScanOptions(sensitivity_level="HIGH").sensitivity_level == SensitivityLevel.HIGH

    @pytest.mark.parametrize("value", ["lots", -5, None, True])
    def test_bad_max_results(self, value):
        """Test the max_results fallback."""
        assert ScanOptions(max_results=value).max_results == 50

    def test_numeric_string_max_results(self):
        """Test coercion of numeric strings."""
        assert ScanOptions(max_results="10").max_results == 10

    @pytest.mark.parametrize("value", [1.5, -0.1, "high", True])
    def test_bad_min_confidence(self, value):
        """Test that unusable thresholds are ignored."""
        assert ScanOptions(min_confidence=value).min_confidence is None

    def test_bad_include_context(self):
        """Test the include_context fallback."""
        assert ScanOptions(include_context="maybe").include_context is True
        assert ScanOptions(include_context=0).include_context is False

    def test_single_domain_string(self):
        """Test a bare string as domain filter."""
        assert ScanOptions(filter_domains="company.com").filter_domains == ["company.com"]

    def test_camel_case_keys(self):
        """Test wire names."""
        options = ScanOptions.from_any({"sensitivityLevel": "high", "maxResults": 5})

        assert options.sensitivity_level == SensitivityLevel.HIGH
        assert options.max_results == 5

    def test_from_any_overrides(self):
        """Test keyword overrides on top of an instance."""
        base = ScanOptions(sensitivity_level="low", max_results=7)
        options = ScanOptions.from_any(base, max_results=3)

        assert options.sensitivity_level == SensitivityLevel.LOW
        assert options.max_results == 3

    def test_from_any_garbage(self):
        """Test that unusable option objects mean defaults."""
        assert ScanOptions.from_any(["not", "options"]) == ScanOptions()


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test defaults without environment."""
        for name in ("LEAK_CHECKER_SENSITIVITY_LEVEL", "LEAK_CHECKER_DISABLED_DETECTORS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.enable_log_redaction is True
        assert settings.redaction_style == "marker"
        assert settings.marker_format is None

    def test_environment(self, monkeypatch):
        """Test values read from prefixed variables."""
        monkeypatch.setenv("LEAK_CHECKER_SENSITIVITY_LEVEL", "high")
        monkeypatch.setenv("LEAK_CHECKER_DISABLED_DETECTORS", '["email", "us_ssn"]')
        monkeypatch.setenv("LEAK_CHECKER_MAX_RESULTS", "5")

        settings = Settings(_env_file=None)
        options = settings.scan_options()

        assert options.sensitivity_level == SensitivityLevel.HIGH
        assert options.max_results == 5
        assert DetectorType.EMAIL not in options.enabled_detectors
        assert DetectorType.US_SSN not in options.enabled_detectors
        assert DetectorType.CREDIT_CARD in options.enabled_detectors

    def test_get_settings_cached(self, reset_settings):
        """Test that get_settings returns one instance."""
        assert get_settings() is get_settings()
