"""
Text-endpoint translator for DeepLX-compatible services.

Only the page's extracted text is sent, so layout is lost; the
result is wrapped in a simple HTML block for the viewer.
"""

import html
import logging

import httpx

from pdf_html_translator.config import TranslationConfig
from pdf_html_translator.endpoints import resolve_endpoint
from pdf_html_translator.errors import TranslationError
from pdf_html_translator.translator.base import BaseTranslator, PageTask

logger = logging.getLogger(__name__)

NO_CONTENT_HTML = "<p><i>(No text content found on this page)</i></p>"

RESULT_TEMPLATE = """<div class="deeplx-translation" style="font-family: sans-serif; line-height: 1.6;">
  <h3 style="color: #666; border-bottom: 1px solid #eee; padding-bottom: 8px; margin-bottom: 16px; font-size: 0.9em;">
    Translated by DeepLX (Text Only)
  </h3>
  <p>{body}</p>
</div>"""


def extract_translation(payload) -> str:
    """
    Find the translated string in a DeepLX response.

    Deployments disagree on the shape: ``{"code": 200, "data": "..."}``,
    ``{"text": "..."}`` and ``{"alternatives": ["..."]}`` are all seen.
    """
    if not isinstance(payload, dict):
        return ""
    alternatives = payload.get("alternatives")
    first_alternative = alternatives[0] if isinstance(alternatives, list) and alternatives else None
    for candidate in (payload.get("data"), payload.get("text"), first_alternative):
        if isinstance(candidate, str) and candidate:
            return candidate
    return ""


class TextEndpointTranslator(BaseTranslator):
    """Translation of extracted page text through a DeepLX-style endpoint."""

    @property
    def method_name(self) -> str:
        return "text-endpoint"

    @property
    def requires_text(self) -> bool:
        return True

    def is_fatal(self, exc: BaseException) -> bool:
        # Every failure from a text endpoint is worth another attempt
        return False

    def translate(self, task: PageTask, config: TranslationConfig) -> str:
        text = task.text or ""
        if not text.strip():
            logger.info("Page %d has no text, skipping translation", task.page_number)
            return NO_CONTENT_HTML

        endpoint = resolve_endpoint(config)
        headers = {"Content-Type": "application/json"}
        api_key = config.effective_api_key
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        logger.debug(
            "Text translation of page %d: sending %d chars to %s",
            task.page_number,
            len(text),
            endpoint,
        )

        try:
            response = self.client(config).post(
                endpoint,
                json={
                    "text": text,
                    "source_lang": "auto",
                    "target_lang": config.target_lang,
                },
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TranslationError(f"Network error calling {endpoint}: {e}") from e

        if not response.is_success:
            raise TranslationError(
                f"DeepLX Error {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TranslationError(f"Invalid response format from DeepLX: {e}") from e

        translated = extract_translation(payload)
        if not translated:
            raise TranslationError("Invalid response format from DeepLX")

        logger.info(
            "Text translation of page %d: received %d chars",
            task.page_number,
            len(translated),
        )
        body = html.escape(translated).replace("\n", "<br/>")
        return RESULT_TEMPLATE.format(body=body)
