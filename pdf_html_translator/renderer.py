"""
PDF rendering: page count, page rasterization and text extraction.
"""

import base64
import io
import logging
from abc import ABC, abstractmethod
from typing import Any

import fitz  # PyMuPDF
from PIL import Image

from pdf_html_translator.errors import DocumentLoadError

logger = logging.getLogger(__name__)

# Keeps the request payload small enough for vision APIs while
# staying legible for text recognition
MAX_DIMENSION = 768
JPEG_QUALITY = 40


class BaseRenderer(ABC):
    """Abstract rendering collaborator used by the page pipeline."""

    @abstractmethod
    def load_document(self, data: bytes) -> Any:
        """Open a document from raw bytes and return a handle."""
        ...

    @abstractmethod
    def page_count(self, handle: Any) -> int:
        ...

    @abstractmethod
    def render_page(self, handle: Any, page_number: int, max_dimension: int = MAX_DIMENSION) -> str:
        """Render a 1-based page to a JPEG data URL."""
        ...

    @abstractmethod
    def extract_text(self, handle: Any, page_number: int) -> str:
        ...

    def close(self, handle: Any) -> None:
        """Release a document handle."""


class PyMuPDFRenderer(BaseRenderer):
    """Renderer backed by PyMuPDF, with Pillow for JPEG encoding."""

    def __init__(self, scale: float = 1.0, jpeg_quality: int = JPEG_QUALITY):
        self.scale = scale
        self.jpeg_quality = jpeg_quality

    def load_document(self, data: bytes) -> fitz.Document:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(f"Failed to open PDF: {e}") from e
        if doc.needs_pass:
            doc.close()
            raise DocumentLoadError("PDF is password protected")
        return doc

    def page_count(self, handle: fitz.Document) -> int:
        return len(handle)

    def _page(self, handle: fitz.Document, page_number: int) -> fitz.Page:
        if not 1 <= page_number <= len(handle):
            raise ValueError(
                f"Page {page_number} out of range (document has {len(handle)} pages)"
            )
        return handle[page_number - 1]

    def render_page(
        self,
        handle: fitz.Document,
        page_number: int,
        max_dimension: int = MAX_DIMENSION,
    ) -> str:
        """
        Render a page to a base64 JPEG data URL.

        Pages larger than ``max_dimension`` on either side are scaled
        down, preserving aspect ratio.
        """
        page = self._page(handle, page_number)
        zoom = self.scale
        width, height = page.rect.width * zoom, page.rect.height * zoom
        if width > max_dimension or height > max_dimension:
            zoom *= min(max_dimension / width, max_dimension / height)

        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=self.jpeg_quality)
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")

        logger.debug(
            "Rendered page %d at %dx%d (%d bytes)",
            page_number,
            pix.width,
            pix.height,
            buffer.tell(),
        )
        return f"data:image/jpeg;base64,{encoded}"

    def extract_text(self, handle: fitz.Document, page_number: int) -> str:
        return self._page(handle, page_number).get_text("text")

    def close(self, handle: fitz.Document) -> None:
        handle.close()
