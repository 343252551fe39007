"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from leadrecon.core.config import FeatureFlags, GraphConfig, IntegrationSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of these tests."""
    for name in (
        "LEADRECON_NODE_TIMEOUT",
        "LEADRECON_MAX_WAVEFRONTS",
        "LEADRECON_MAX_CONCURRENT_RUNS",
        "LEADRECON_FAILURE_POLICY",
        "GAMMA_ENABLED",
        "DEFAULT_DECK_PROVIDER",
        "GAMMA_API_KEY",
        "STRIPE_SECRET_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


class TestGraphConfig:
    """Test suite for engine configuration."""

    def test_defaults(self):
        config = GraphConfig()
        assert config.node_timeout == 120.0
        assert config.max_wavefronts == 50
        assert config.max_concurrent_runs == 5
        assert config.failure_policy == "record"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("LEADRECON_FAILURE_POLICY", "raise")
        monkeypatch.setenv("LEADRECON_MAX_WAVEFRONTS", "7")
        config = GraphConfig()
        assert config.failure_policy == "raise"
        assert config.max_wavefronts == 7

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            GraphConfig(failure_policy="ignore")
        with pytest.raises(ValidationError):
            GraphConfig(max_concurrent_runs=0)

    def test_frozen(self):
        config = GraphConfig()
        with pytest.raises(ValidationError):
            config.max_wavefronts = 3


class TestFeatureFlags:
    """Test suite for deck provider flags."""

    def test_defaults(self):
        flags = FeatureFlags()
        assert flags.gamma_enabled is True
        assert flags.default_deck_provider == "google"

    @pytest.mark.parametrize("raw,expected", [
        ("false", False),
        ("FALSE", False),
        ("true", True),
        ("0", True),
        ("no", True),
        ("", True),
    ])
    def test_only_false_disables_gamma(self, monkeypatch, raw, expected):
        monkeypatch.setenv("GAMMA_ENABLED", raw)
        assert FeatureFlags().gamma_enabled is expected

    def test_provider_normalised(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_DECK_PROVIDER", " Gamma ")
        assert FeatureFlags().default_deck_provider == "gamma"

    def test_unknown_provider(self):
        with pytest.raises(ValidationError):
            FeatureFlags(default_deck_provider="both")


class TestIntegrationSettings:
    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("GAMMA_API_KEY", "g-key")
        settings = IntegrationSettings()
        assert settings.gamma_api_key == "g-key"
        assert settings.stripe_secret_key is None
