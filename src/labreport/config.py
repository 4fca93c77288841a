"""Configuration loading from environment variables and CLI flags."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Provider(str, Enum):
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


DEFAULTS = {
    Provider.GEMINI: "gemini-2.5-flash",
    Provider.ANTHROPIC: "claude-sonnet-4-6",
    Provider.OPENAI: "gpt-4o",
}

ENV_KEYS = {
    Provider.GEMINI: "GEMINI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.OPENAI: "OPENAI_API_KEY",
}

# Low temperature keeps transcribed numbers and calculations stable between runs.
DEFAULT_TEMPERATURE = 0.2


@dataclass
class Config:
    provider: Provider
    model: str
    api_key: str
    temperature: float = DEFAULT_TEMPERATURE

    @classmethod
    def from_env(
        cls,
        provider: Provider,
        model_override: Optional[str] = None,
        api_key_override: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> "Config":
        model = model_override or DEFAULTS[provider]
        api_key = api_key_override or os.environ.get(ENV_KEYS[provider], "")
        if not api_key:
            raise RuntimeError(
                f"No API key for {provider.value}. "
                f"Set {ENV_KEYS[provider]} in your environment or .env file."
            )
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE
        return cls(provider=provider, model=model, api_key=api_key, temperature=temperature)
