"""Tests for labreport.config — Config.from_env() and Provider enum."""

import pytest

from labreport.config import DEFAULT_TEMPERATURE, DEFAULTS, ENV_KEYS, Config, Provider


class TestProviderEnum:
    def test_values(self):
        assert Provider.GEMINI.value == "gemini"
        assert Provider.ANTHROPIC.value == "anthropic"
        assert Provider.OPENAI.value == "openai"

    def test_string_equality(self):
        assert Provider.GEMINI == "gemini"

    def test_construction_from_string(self):
        assert Provider("gemini") is Provider.GEMINI
        assert Provider("openai") is Provider.OPENAI

    def test_every_provider_has_a_default_model_and_env_key(self):
        for provider in Provider:
            assert DEFAULTS[provider]
            assert ENV_KEYS[provider].endswith("_API_KEY")


class TestConfigFromEnv:
    # ── Model resolution ─────────────────────────────────────────────────

    def test_uses_default_model_for_gemini(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "g-test")
        config = Config.from_env(Provider.GEMINI)
        assert config.model == DEFAULTS[Provider.GEMINI]

    def test_model_override_takes_precedence_over_default(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
        config = Config.from_env(Provider.ANTHROPIC, model_override="claude-custom-v1")
        assert config.model == "claude-custom-v1"

    # ── API key resolution ───────────────────────────────────────────────

    def test_api_key_read_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai-from-env")
        config = Config.from_env(Provider.OPENAI)
        assert config.api_key == "sk-oai-from-env"

    def test_api_key_override_takes_precedence_over_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key-should-not-be-used")
        config = Config.from_env(Provider.GEMINI, api_key_override="direct-key")
        assert config.api_key == "direct-key"

    def test_gemini_reads_gemini_env_var_not_openai(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "wrong-key")
        with pytest.raises(RuntimeError):
            Config.from_env(Provider.GEMINI)

    # ── Missing key errors ───────────────────────────────────────────────

    def test_error_message_names_the_env_var(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
            Config.from_env(Provider.GEMINI)

    def test_error_message_names_the_provider(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(RuntimeError, match="anthropic"):
            Config.from_env(Provider.ANTHROPIC)

    # ── Temperature ──────────────────────────────────────────────────────

    def test_temperature_defaults_low(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        config = Config.from_env(Provider.GEMINI)
        assert config.temperature == DEFAULT_TEMPERATURE == 0.2

    def test_temperature_override(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        config = Config.from_env(Provider.GEMINI, temperature=0.7)
        assert config.temperature == 0.7

    def test_zero_temperature_is_kept(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        config = Config.from_env(Provider.GEMINI, temperature=0.0)
        assert config.temperature == 0.0
