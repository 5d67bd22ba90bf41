"""Tests for configuration management."""

import json
from dataclasses import replace

import pytest
from pdf_html_translator.config import (
    DEFAULT_MODEL,
    ConfigStore,
    ProviderType,
    TranslationConfig,
)
from pdf_html_translator.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clear_api_key_env(monkeypatch):
    monkeypatch.delenv("PDF_TRANSLATOR_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


class TestTranslationConfig:
    def test_default_config(self):
        config = TranslationConfig()
        assert config.provider is ProviderType.VISION
        assert config.model == DEFAULT_MODEL
        assert config.target_lang == "ZH"
        assert config.api_key is None

    def test_config_is_immutable(self):
        config = TranslationConfig(api_key="key")
        with pytest.raises(AttributeError):
            config.api_key = "other"

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("PDF_TRANSLATOR_API_KEY", "test-key-123")
        config = TranslationConfig()
        assert config.effective_api_key == "test-key-123"
        assert config.api_key is None

    def test_openai_key_only_for_vision(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        assert TranslationConfig().effective_api_key == "sk-openai"
        assert TranslationConfig(provider=ProviderType.TEXT_ENDPOINT).effective_api_key is None

    def test_openai_key_dropped_after_provider_switch(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        vision = TranslationConfig()
        text = replace(vision, provider=ProviderType.TEXT_ENDPOINT)
        assert text.api_key is None
        assert text.effective_api_key is None

    def test_explicit_key_overrides_env(self, monkeypatch):
        monkeypatch.setenv("PDF_TRANSLATOR_API_KEY", "env-key")
        config = TranslationConfig(api_key="explicit-key")
        assert config.effective_api_key == "explicit-key"

    def test_validate_accepts_env_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        TranslationConfig().validate()

    def test_provider_string_is_parsed(self):
        config = TranslationConfig(provider="text-endpoint")
        assert config.provider is ProviderType.TEXT_ENDPOINT

    def test_unknown_provider_rejected(self):
        with pytest.raises(ConfigurationError):
            TranslationConfig(provider="carrier-pigeon")

    def test_target_language_name(self):
        assert TranslationConfig(target_lang="ZH").target_language_name == "Simplified Chinese"
        assert TranslationConfig(target_lang="en").target_language_name == "English"
        assert TranslationConfig(target_lang="Klingon").target_language_name == "Klingon"

    def test_validate_requires_key_for_vision(self):
        with pytest.raises(ConfigurationError):
            TranslationConfig().validate()
        TranslationConfig(api_key="key").validate()

    def test_validate_text_endpoint_without_key(self):
        TranslationConfig(provider=ProviderType.TEXT_ENDPOINT).validate()


class TestFromDict:
    def test_missing_provider_defaults_to_vision(self):
        config = TranslationConfig.from_dict(
            {"base_url": "https://api.example.com", "api_key": "k", "model": "m"}
        )
        assert config.provider is ProviderType.VISION
        assert config.base_url == "https://api.example.com"

    def test_legacy_camel_case_keys(self):
        config = TranslationConfig.from_dict(
            {"baseUrl": "https://x.test/v1", "apiKey": "sk-1", "modelName": "gpt-4o-mini"}
        )
        assert config.base_url == "https://x.test/v1"
        assert config.api_key == "sk-1"
        assert config.model == "gpt-4o-mini"

    def test_legacy_provider_names(self):
        assert TranslationConfig.from_dict({"provider": "deeplx"}).provider is ProviderType.TEXT_ENDPOINT
        assert TranslationConfig.from_dict({"provider": "openai"}).provider is ProviderType.VISION

    def test_unknown_keys_ignored(self):
        config = TranslationConfig.from_dict({"theme": "dark", "api_key": "k"})
        assert config.api_key == "k"

    def test_to_dict_roundtrip(self):
        config = TranslationConfig(
            provider=ProviderType.TEXT_ENDPOINT, base_url="http://h/translate", api_key="k"
        )
        data = config.to_dict()
        assert data["provider"] == "text-endpoint"
        assert TranslationConfig.from_dict(data) == config


class TestConfigStore:
    def test_missing_file_gives_defaults(self, tmp_path):
        store = ConfigStore(tmp_path / "missing.json")
        assert store.load() == TranslationConfig()

    def test_save_then_load(self, tmp_path):
        store = ConfigStore(tmp_path / "nested" / "config.json")
        config = TranslationConfig(base_url="https://api.example.com", api_key="sk-1", model="m")
        store.save(config)
        assert store.path.exists()
        assert store.load() == config

    def test_env_key_not_saved(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("PDF_TRANSLATOR_API_KEY", "env-key")
        store = ConfigStore(tmp_path / "config.json")
        store.save(TranslationConfig())
        saved = json.loads(store.path.read_text(encoding="utf-8"))
        assert saved["api_key"] is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigStore(path).load()

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(["a", "b"]), encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigStore(path).load()
