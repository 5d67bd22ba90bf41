"""
Request endpoint resolution.

Users paste all kinds of base URLs into the settings: a bare domain,
a versioned API root, or the full chat-completions URL. All of them
resolve to the same request endpoint.
"""

import re

from pdf_html_translator.config import (
    DEFAULT_TEXT_ENDPOINT_URL,
    DEFAULT_VISION_BASE_URL,
    ProviderType,
    TranslationConfig,
)

COMPLETIONS_PATH = "/chat/completions"
DEFAULT_VERSION_SEGMENT = "/v1"

_VERSION_SEGMENT = re.compile(r"/v\d+$")


def resolve_chat_endpoint(base_url: str) -> str:
    """
    Resolve a user-supplied base URL to a chat-completions endpoint.

    Examples:
        https://api.example.com                     → .../v1/chat/completions
        https://api.example.com/v1                  → .../v1/chat/completions
        https://api.example.com/v1/chat/completions → unchanged
    """
    url = (base_url or "").strip().rstrip("/")
    if not url:
        url = DEFAULT_VISION_BASE_URL

    if url.endswith(COMPLETIONS_PATH):
        return url
    if _VERSION_SEGMENT.search(url):
        return url + COMPLETIONS_PATH
    return url + DEFAULT_VERSION_SEGMENT + COMPLETIONS_PATH


def resolve_endpoint(config: TranslationConfig) -> str:
    """Return the exact URL the configured provider should POST to."""
    if config.provider is ProviderType.VISION:
        return resolve_chat_endpoint(config.base_url)
    # Text endpoints are used verbatim
    return (config.base_url or "").strip() or DEFAULT_TEXT_ENDPOINT_URL
