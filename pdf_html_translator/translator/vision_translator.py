"""
Vision translator: sends the rendered page image to a chat-completions API.

Works with any OpenAI-compatible endpoint whose model accepts image
input. The model reads the page, translates it and returns the page
rebuilt as an HTML fragment.
"""

import json
import logging

import httpx

from pdf_html_translator.config import TranslationConfig
from pdf_html_translator.endpoints import resolve_endpoint
from pdf_html_translator.errors import ErrorClassification, TranslationError
from pdf_html_translator.translator.base import BaseTranslator, PageTask
from pdf_html_translator.utils import normalize_html

logger = logging.getLogger(__name__)

# Configuration, auth and model errors: retrying will not help
FATAL_STATUS_CODES = frozenset({400, 401, 403, 404})

MAX_TOKENS = 4096
TEMPERATURE = 0.3

PROMPT_TEMPLATE = """You are a professional document translator.
Translate the content of this image from its original language into {language}.

CRITICAL OUTPUT INSTRUCTIONS:
1. Return ONLY valid HTML code. Do not wrap it in markdown code blocks (like ```html).
2. LAYOUT & FORMATTING:
   - Use semantic HTML tags (<h1>, <p>, <ul>) to replicate the visual structure.
   - Use inline CSS for alignment (text-align), font-weight, and basic layout.

3. TABLES (CRITICAL):
   - Detect ALL tables in the document.
   - You MUST reconstruct them using HTML <table>, <tr>, <td>, <th> tags.
   - Preserve column spans (colspan) and row spans (rowspan) to match the original structure exactly.
   - Translate all text content inside the tables.
   - DO NOT replace tables with placeholders.

4. IMAGES & CHARTS:
   - If the image is a Chart, Graph, or Diagram containing data: Convert the visual data into an HTML Table representation so the data is preserved.
   - If the image is a diagram with text: Extract the text and structure it using <div> or lists to preserve the meaning.
   - If the image is a purely decorative photo: Insert a placeholder <div class="image-placeholder">[Image: Description]</div>, with the description in {language}.

5. TRANSLATION:
   - Translate ALL text content into {language}.
   - Ensure the tone is professional.

6. RESTRICTIONS:
   - DO NOT use Markdown.
   - DO NOT use LaTeX or MathJax (e.g. no $...$ or \\[...\\]). Use HTML entities for math symbols (e.g. &sum;, &alpha;).
   - DO NOT escape HTML tags (e.g. output <sup>17</sup>, NOT &lt;sup&gt;17&lt;/sup&gt;).
   - DO NOT generate <img src="..."> tags.
   - DO NOT output ```html or ```.

7. Do not include <html>, <head>, or <body> tags. Start directly with the content elements."""


def build_prompt(language: str) -> str:
    return PROMPT_TEMPLATE.format(language=language)


def _error_detail(response: httpx.Response) -> str:
    """Pull the most useful error message out of a failed response."""
    body = response.text
    try:
        payload = json.loads(body)
    except ValueError:
        return body[:300]
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if payload.get("message"):
            return str(payload["message"])
    return json.dumps(payload, ensure_ascii=False)


class VisionTranslator(BaseTranslator):
    """Translation of rendered page images through a chat-completions API."""

    @property
    def method_name(self) -> str:
        return "vision"

    def build_request(self, task: PageTask, config: TranslationConfig) -> dict:
        return {
            "model": config.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": build_prompt(config.target_language_name)},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": task.image_data_url(),
                                "detail": "high",
                            },
                        },
                    ],
                }
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }

    def translate(self, task: PageTask, config: TranslationConfig) -> str:
        """Translate a page image into HTML."""
        api_key = config.effective_api_key
        if not api_key:
            raise TranslationError(
                "API Key is missing. Please configure it in settings.",
                ErrorClassification.FATAL,
            )
        if task.image is None:
            raise TranslationError(
                f"Page {task.page_number} has no rendered image",
                ErrorClassification.FATAL,
            )

        endpoint = resolve_endpoint(config)
        logger.debug("Vision translation of page %d via %s", task.page_number, endpoint)

        try:
            response = self.client(config).post(
                endpoint,
                json=self.build_request(task, config),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
            )
        except httpx.HTTPError as e:
            raise TranslationError(f"Network error calling {endpoint}: {e}") from e

        if not response.is_success:
            status = response.status_code
            classification = (
                ErrorClassification.FATAL
                if status in FATAL_STATUS_CODES
                else ErrorClassification.RETRYABLE
            )
            raise TranslationError(
                f"API Error {status}: {_error_detail(response)}",
                classification,
                status_code=status,
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise TranslationError(
                f"Invalid API Response: Expected JSON but got '{content_type}'. "
                f"URL: {endpoint}. Response preview: {response.text[:150]}..."
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TranslationError(f"Invalid API Response: malformed JSON ({e})") from e

        choice = {}
        if isinstance(data, dict) and isinstance(data.get("choices"), list) and data["choices"]:
            choice = data["choices"][0] or {}
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(choice, dict) or not isinstance(content, (str, type(None))):
            raise TranslationError(
                "Invalid API Response: unexpected completion shape. "
                f"Response preview: {response.text[:150]}..."
            )

        if not content:
            if choice.get("finish_reason") == "content_filter":
                raise TranslationError("Content was filtered by the AI provider.")
            raise TranslationError(
                "Empty response from API. The model might not support image "
                "inputs or the prompt."
            )

        html = normalize_html(content)
        logger.info(
            "Vision translation of page %d: received %d chars",
            task.page_number,
            len(html),
        )
        return html
