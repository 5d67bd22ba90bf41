"""
Utility functions for the PDF → HTML translation pipeline.
"""

import logging
import re
import time
from typing import Callable, Optional, TypeVar

from pdf_html_translator.errors import TranslationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3

# Inline formatting tags that backends sometimes return HTML-escaped
INLINE_TAG_ALLOWLIST = ("sup", "sub", "b", "i", "strong", "em")

_FENCE_OPEN = re.compile(r"^\s*```(?:html)?[ \t]*\r?\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*$")
_ESCAPED_TAG = re.compile(
    r"&lt;(/?)(" + "|".join(INLINE_TAG_ALLOWLIST) + r")&gt;",
    re.IGNORECASE,
)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the pipeline."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _is_fatal_error(exc: BaseException) -> bool:
    """Default classifier: only TranslationErrors marked fatal stop retrying."""
    return isinstance(exc, TranslationError) and exc.is_fatal


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Delay after the given 1-based attempt: 1s, 2s, 4s, ..."""
    return base_delay * (2 ** (attempt - 1))


def with_retry(
    operation: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    is_fatal: Callable[[BaseException], bool] = _is_fatal_error,
    base_delay: float = 1.0,
    sleep: Optional[Callable[[float], None]] = None,
    description: str = "operation",
) -> T:
    """
    Run an operation with bounded retries and exponential backoff.

    Fatal errors (per ``is_fatal``) are raised immediately. Retryable errors
    are retried until ``max_attempts`` is reached, then the last one is
    re-raised.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    sleep = sleep or time.sleep

    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except Exception as e:
            if is_fatal(e):
                logger.error(
                    "%s failed with non-retryable error: %s", description, e
                )
                raise
            if attempt >= max_attempts:
                logger.error(
                    "%s failed after %d attempts: %s", description, attempt, e
                )
                raise
            delay = backoff_delay(attempt, base_delay)
            logger.warning(
                "Attempt %d/%d for %s failed: %s. Retrying in %.1fs",
                attempt,
                max_attempts,
                description,
                e,
                delay,
            )
            sleep(delay)

    raise AssertionError("unreachable")


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence (```html ... ```) wrapped around a response."""
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def unescape_inline_tags(html: str) -> str:
    """
    Turn over-escaped inline tags back into markup.

    Only tags in INLINE_TAG_ALLOWLIST are touched; any other escaped
    markup is left as the backend returned it.
    """
    return _ESCAPED_TAG.sub(lambda m: f"<{m.group(1)}{m.group(2)}>", html)


def normalize_html(text: str) -> str:
    """Clean up a vision backend response before it is stored."""
    return unescape_inline_tags(strip_code_fence(text))
