"""
Base translator interface and common data structures.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from pdf_html_translator.config import TranslationConfig
from pdf_html_translator.errors import TranslationError


@dataclass(frozen=True)
class PageTask:
    """One page handed to a translator."""
    page_number: int  # 1-based
    image: Optional[Union[str, bytes]] = None
    text: Optional[str] = None

    def image_data_url(self) -> Optional[str]:
        """Return the page image as a data URL, whatever form it was given in."""
        if self.image is None:
            return None
        if isinstance(self.image, bytes):
            encoded = base64.b64encode(self.image).decode("ascii")
            return f"data:image/jpeg;base64,{encoded}"
        if self.image.startswith("data:"):
            return self.image
        return f"data:image/jpeg;base64,{self.image}"


class BaseTranslator(ABC):
    """Abstract base for all translation backends."""

    def __init__(self, client: Optional[httpx.Client] = None):
        self._client = client
        self._owns_client = client is None

    @property
    @abstractmethod
    def method_name(self) -> str:
        """Human-readable name of this translation backend."""
        ...

    @property
    def requires_text(self) -> bool:
        """Whether the backend needs the page's extracted text."""
        return False

    @abstractmethod
    def translate(self, task: PageTask, config: TranslationConfig) -> str:
        """
        Translate one page into an HTML fragment.

        Args:
            task: The page to translate.
            config: Backend configuration for this run.

        Returns:
            HTML fragment for the page.

        Raises:
            TranslationError: on any failure, classified fatal or retryable.
        """
        ...

    def is_fatal(self, exc: BaseException) -> bool:
        """Error classifier used by the retry engine."""
        return isinstance(exc, TranslationError) and exc.is_fatal

    def client(self, config: TranslationConfig) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=config.timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
