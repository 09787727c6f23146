"""Tests for provider configuration."""

import pytest
from llmr.config import (ProviderConfig, anthropic_config, load_provider_config, openai_config,
                         validate_provider_config)


def test_presets():
    """Test the built-in provider presets and overrides."""
    anthropic = anthropic_config()
    assert anthropic.provider == "anthropic"
    assert anthropic.url == "https://api.anthropic.com"
    assert anthropic.max_tokens == 1024
    assert anthropic.max_tries == 3

    openai = openai_config(model="gpt-4o", temperature=0.2)
    assert openai.provider == "openai"
    assert openai.model == "gpt-4o"
    assert openai.temperature == 0.2


def test_url_trailing_slash_is_stripped():
    """Test that base URLs are normalised."""
    config = ProviderConfig(provider="local", url="http://localhost:8080/", model="m")
    assert config.url == "http://localhost:8080"


@pytest.mark.parametrize("overrides", [
    {"provider": "my provider"},
    {"temperature": 1.5},
    {"temperature": -0.1},
    {"max_tokens": 0},
    {"max_tries": 0},
    {"unknown_field": 1},
])
def test_invalid_settings(overrides):
    """Test that out-of-range or unknown settings are rejected."""
    raw = {"provider": "local", "url": "http://localhost", "model": "m", **overrides}
    with pytest.raises(ValueError, match="Provider configuration error"):
        validate_provider_config(raw)


def test_api_key_from_environment(monkeypatch):
    """Test that a missing key is read from <PROVIDER>_API_KEY."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
    assert anthropic_config().resolved_api_key() == "from-env"
    assert anthropic_config(api_key="explicit").resolved_api_key() == "explicit"
    monkeypatch.delenv("ANTHROPIC_API_KEY")
    assert anthropic_config().resolved_api_key() == ""


def test_load_provider_config_from_yaml():
    """Test loading a provider configuration from YAML text."""
    config = load_provider_config("""
provider: openai
url: https://api.openai.com/
model: gpt-4
max_tool_calls: 5
""")
    assert config.url == "https://api.openai.com"
    assert config.max_tool_calls == 5


def test_load_provider_config_requires_mapping():
    """Test that non-mapping YAML is rejected."""
    with pytest.raises(ValueError, match="YAML mapping"):
        load_provider_config("- openai\n")
