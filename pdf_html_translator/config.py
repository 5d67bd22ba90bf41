"""
Configuration management for the PDF → HTML translation pipeline.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pdf_html_translator.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_VISION_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TEXT_ENDPOINT_URL = "http://localhost:1188/translate"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_TARGET_LANG = "ZH"

DEFAULT_CONFIG_PATH = Path("~/.config/pdf-html-translator/config.json")

# Human-readable names used in the vision prompt
LANGUAGE_NAMES = {
    "ZH": "Simplified Chinese",
    "ZH-HANS": "Simplified Chinese",
    "ZH-HANT": "Traditional Chinese",
    "EN": "English",
    "EN-US": "English",
    "EN-GB": "English",
    "JA": "Japanese",
    "KO": "Korean",
    "DE": "German",
    "FR": "French",
    "ES": "Spanish",
    "IT": "Italian",
    "PT": "Portuguese",
    "RU": "Russian",
    "AR": "Arabic",
}

# Keys written by the browser version of the app
_LEGACY_KEYS = {
    "baseUrl": "base_url",
    "apiKey": "api_key",
    "modelName": "model",
    "targetLang": "target_lang",
}


class ProviderType(Enum):
    VISION = "vision"
    TEXT_ENDPOINT = "text-endpoint"

    @classmethod
    def parse(cls, value: Union[str, "ProviderType", None]) -> "ProviderType":
        """Parse a stored provider value; missing values default to VISION."""
        if isinstance(value, ProviderType):
            return value
        if not value:
            return cls.VISION
        normalized = str(value).strip().lower()
        # The original app stored 'openai' / 'deeplx'
        aliases = {"openai": cls.VISION, "deeplx": cls.TEXT_ENDPOINT}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ConfigurationError(f"Unknown translation provider: {value!r}")


@dataclass(frozen=True)
class TranslationConfig:
    """Translation backend configuration. Immutable for the length of a run."""
    provider: ProviderType = ProviderType.VISION
    base_url: str = ""
    # Only a key the user supplied; env keys are read by effective_api_key
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    target_lang: str = DEFAULT_TARGET_LANG
    timeout: float = 120.0

    def __post_init__(self):
        object.__setattr__(self, "provider", ProviderType.parse(self.provider))
        object.__setattr__(self, "api_key", self.api_key or None)

    @property
    def effective_api_key(self) -> Optional[str]:
        """
        The key to send with requests.

        An explicit ``api_key`` wins. Otherwise PDF_TRANSLATOR_API_KEY is
        used, and OPENAI_API_KEY only for the vision provider. The lookup
        happens on every access so a provider switch never carries an
        OpenAI key to another service.
        """
        if self.api_key:
            return self.api_key
        api_key = os.environ.get("PDF_TRANSLATOR_API_KEY")
        if not api_key and self.provider is ProviderType.VISION:
            api_key = os.environ.get("OPENAI_API_KEY")
        return api_key or None

    @property
    def target_language_name(self) -> str:
        return LANGUAGE_NAMES.get(self.target_lang.upper(), self.target_lang)

    def validate(self) -> None:
        """Raise ConfigurationError if a run cannot be started with this config."""
        if self.provider is ProviderType.VISION:
            if not self.effective_api_key:
                raise ConfigurationError(
                    "API key is missing. Set it in the config file, pass --api-key, "
                    "or export PDF_TRANSLATOR_API_KEY."
                )
            if not self.model:
                raise ConfigurationError("Model name is required for the vision provider")
        if not self.target_lang:
            raise ConfigurationError("Target language is required")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TranslationConfig":
        """
        Build a config from a deserialized mapping.

        Tolerates a missing provider field, unknown keys and the camelCase
        keys used by the browser version.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            key = _LEGACY_KEYS.get(key, key)
            if key in known and value is not None:
                kwargs[key] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serializable mapping; environment keys are never included."""
        data = asdict(self)
        data["provider"] = self.provider.value
        return data


class ConfigStore:
    """JSON-file backed configuration storage."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    def load(self) -> TranslationConfig:
        if not self.path.exists():
            logger.debug("No config file at %s, using defaults", self.path)
            return TranslationConfig()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {self.path} must contain a JSON object")

        logger.info("Loaded configuration from %s", self.path)
        return TranslationConfig.from_dict(data)

    def save(self, config: TranslationConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("Configuration saved to %s", self.path)
