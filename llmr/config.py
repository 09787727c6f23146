""" Provider configuration: model, sampling and retry settings for an LLM client. """

import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ProviderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider: str
    url: str
    model: str
    max_tokens: int = Field(default=1024, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    max_tries: int = Field(default=3, ge=1)
    retry_backoff: float = Field(default=0.5, ge=0.0)  # seconds, doubled after each failed attempt
    max_tool_calls: int = Field(default=25, ge=0)
    api_key: Optional[str] = None

    @field_validator("provider")
    @classmethod
    def _no_spaces(cls, v: str) -> str:
        if " " in v:
            raise ValueError("Provider name cannot contain spaces")
        return v

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def resolved_api_key(self) -> str:
        """ The configured key, or `<PROVIDER>_API_KEY` from the environment. """
        if self.api_key:
            return self.api_key
        return os.environ.get(f"{self.provider.upper()}_API_KEY", "")


def anthropic_config(**overrides: Any) -> ProviderConfig:
    return ProviderConfig(**{
        "provider": "anthropic",
        "url": "https://api.anthropic.com",
        "model": "claude-opus-4-20250514",
        **overrides,
    })


def openai_config(**overrides: Any) -> ProviderConfig:
    return ProviderConfig(**{
        "provider": "openai",
        "url": "https://api.openai.com",
        "model": "gpt-4",
        **overrides,
    })


def validate_provider_config(raw: Dict[str, Any]) -> ProviderConfig:
    """Validate a raw dict against ProviderConfig."""
    try:
        return ProviderConfig.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Provider configuration error: {e}")


def load_provider_config(yaml_text: str) -> ProviderConfig:
    data = yaml.safe_load(yaml_text)
    if not isinstance(data, dict):
        raise ValueError("Provider configuration must be a YAML mapping")
    return validate_provider_config(data)
