"""
Translation backends, one adapter per provider.
"""

from typing import Optional

import httpx

from pdf_html_translator.config import ProviderType, TranslationConfig
from pdf_html_translator.translator.base import BaseTranslator, PageTask
from pdf_html_translator.translator.text_translator import TextEndpointTranslator
from pdf_html_translator.translator.vision_translator import VisionTranslator

TRANSLATORS: dict[ProviderType, type[BaseTranslator]] = {
    ProviderType.VISION: VisionTranslator,
    ProviderType.TEXT_ENDPOINT: TextEndpointTranslator,
}


def create_translator(
    config: TranslationConfig,
    client: Optional[httpx.Client] = None,
) -> BaseTranslator:
    """Instantiate the translator for the configured provider."""
    return TRANSLATORS[config.provider](client=client)


__all__ = [
    "BaseTranslator",
    "PageTask",
    "TextEndpointTranslator",
    "VisionTranslator",
    "TRANSLATORS",
    "create_translator",
]
