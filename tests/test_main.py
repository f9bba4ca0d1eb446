"""Tests for command line option handling."""

import pytest

from speakerctrl.__main__ import build_parser, resolve_options
from speakerctrl.core.config import ConfigManager


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    config = ConfigManager("SpeakerCTRLTest", "TestMain")
    config.clear()
    return config


class TestResolveOptions:
    """Test flags merged over saved settings."""

    def test_settings_used_without_flags(self, config: ConfigManager) -> None:
        """Test saved values apply when no flag is given."""
        config.set_base_url("http://10.0.0.5:8888")
        config.set_request_timeout(20)
        parsed = build_parser().parse_args([])

        assert resolve_options(parsed, config) == ("http://10.0.0.5:8888", 20, 15, 1.0)

    def test_flags_override(self, config: ConfigManager) -> None:
        """Test flags win over saved values."""
        parsed = build_parser().parse_args(
            ["--url", "http://host:9000", "--timeout", "5", "--poll", "30", "--delay", "2.5"]
        )
        assert resolve_options(parsed, config) == ("http://host:9000", 5, 30, 2.5)

    def test_flags_clamped(self, config: ConfigManager) -> None:
        """Test out-of-range flags are clamped like saved settings."""
        parsed = build_parser().parse_args(
            ["--timeout", "0", "--poll", "1", "--delay", "-3"]
        )
        _, timeout, poll_interval, delay = resolve_options(parsed, config)
        assert timeout == 1
        assert poll_interval == 5
        assert delay == 0.0

    def test_large_flags_clamped(self, config: ConfigManager) -> None:
        """Test upper bounds apply to flags."""
        parsed = build_parser().parse_args(["--timeout", "600", "--delay", "120"])
        _, timeout, _, delay = resolve_options(parsed, config)
        assert timeout == 60
        assert delay == 30.0
