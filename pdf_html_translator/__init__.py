"""
PDF → HTML Translator
=====================

Translates a PDF document page by page into layout-preserving HTML
through a pluggable translation backend.

Architecture:
    PDF → Page Rendering → Translator (with retry/backoff) → Session Snapshot
        → HTML Export

Translation Providers:
    1. vision: any OpenAI-compatible chat-completions API with image input;
       the model rebuilds the page (tables, charts, formatting) as HTML
    2. text-endpoint: a DeepLX-compatible endpoint fed with extracted text
"""

__version__ = "1.0.0"

from pdf_html_translator.config import ProviderType, TranslationConfig


def __getattr__(name: str):
    """Lazy import for modules that require PyMuPDF."""
    if name == "PagePipeline":
        from pdf_html_translator.pipeline import PagePipeline
        return PagePipeline
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PagePipeline", "ProviderType", "TranslationConfig"]
