"""
Page pipeline orchestrator for PDF → HTML translation.

Drives one document run:
1. Load the PDF and create one pending result per page
2. For each page, in order: render → translate (with retries) → record
3. Publish a fresh session snapshot after every page transition

Pages are processed strictly one at a time. A page that fails is
recorded as failed and the run moves on; only a document that cannot
be opened ends the run in the error state.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Union

from pdf_html_translator.config import TranslationConfig
from pdf_html_translator.errors import DocumentLoadError
from pdf_html_translator.renderer import BaseRenderer, PyMuPDFRenderer
from pdf_html_translator.session import AppState, DocumentSession, PageStatus
from pdf_html_translator.translator import BaseTranslator, PageTask, create_translator
from pdf_html_translator.utils import DEFAULT_MAX_ATTEMPTS, with_retry

logger = logging.getLogger(__name__)

SessionListener = Callable[[DocumentSession], None]
StateListener = Callable[[AppState], None]


class PagePipeline:
    """
    Sequential page-by-page PDF translation pipeline.

    Usage:
        config = TranslationConfig(api_key="sk-...", model="gpt-4o")
        pipeline = PagePipeline(config, on_update=print)
        session = pipeline.process_document("document.pdf")
        for page in session.pages:
            print(page.page_number, page.status.value)
    """

    def __init__(
        self,
        config: TranslationConfig,
        renderer: Optional[BaseRenderer] = None,
        translator: Optional[BaseTranslator] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Optional[Callable[[float], None]] = None,
        on_update: Optional[SessionListener] = None,
        on_state_change: Optional[StateListener] = None,
    ):
        self.config = config
        self.renderer = renderer or PyMuPDFRenderer()
        self.translator = translator or create_translator(config)
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._on_update = on_update
        self._on_state_change = on_state_change

        self.state = AppState.IDLE
        self.session = DocumentSession()

        logger.info(
            "PagePipeline initialized: provider=%s, translator=%s",
            config.provider.value,
            self.translator.method_name,
        )

    def _set_state(self, state: AppState) -> None:
        self.state = state
        if self._on_state_change:
            self._on_state_change(state)

    def _publish(self, session: DocumentSession) -> None:
        self.session = session
        if self._on_update:
            self._on_update(session)

    def reset(self) -> None:
        """Return to idle with an empty session."""
        self._publish(DocumentSession())
        self._set_state(AppState.IDLE)

    def process_document(self, source: Union[bytes, str, Path]) -> DocumentSession:
        """
        Translate every page of a PDF document.

        Args:
            source: PDF bytes or a path to a PDF file.

        Returns:
            The final DocumentSession. Individual pages may have failed.

        Raises:
            ConfigurationError: if the configuration cannot start a run.
            DocumentLoadError: if the document cannot be opened.
        """
        self.config.validate()

        start_time = time.time()
        self._set_state(AppState.PROCESSING)
        self._publish(DocumentSession())

        handle = None
        try:
            data = self._read_source(source)
            handle = self.renderer.load_document(data)
            total_pages = self.renderer.page_count(handle)
        except Exception as e:
            logger.error("Failed to load document: %s", e)
            if handle is not None:
                self.renderer.close(handle)
            self._publish(DocumentSession())
            self._set_state(AppState.ERROR)
            if isinstance(e, DocumentLoadError):
                raise
            raise DocumentLoadError(f"Failed to load document: {e}") from e

        logger.info("Processing %d pages", total_pages)
        self._publish(DocumentSession.start(total_pages))

        try:
            for page_number in range(1, total_pages + 1):
                self._process_page(handle, page_number)
        finally:
            self.renderer.close(handle)

        session = self.session.finished(time.time() - start_time)
        self._publish(session)
        self._set_state(AppState.COMPLETED)

        logger.info(
            "Translation complete: %d pages (%d failed), %.1fs total",
            session.total_pages,
            len(session.failed_pages),
            session.total_time_seconds,
        )
        return session

    def _read_source(self, source: Union[bytes, str, Path]) -> bytes:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        path = Path(source)
        if not path.exists():
            raise DocumentLoadError(f"PDF file not found: {path}")
        return path.read_bytes()

    def _process_page(self, handle, page_number: int) -> None:
        """Render, translate and record a single page. Never raises for page failures."""
        page_start = time.time()
        page = self.session.page(page_number)

        try:
            image = self.renderer.render_page(handle, page_number)
            text = (
                self.renderer.extract_text(handle, page_number)
                if self.translator.requires_text
                else None
            )
        except Exception as e:
            logger.error("Failed to render page %d: %s", page_number, e)
            self._publish(self.session.with_page(page.advance(
                PageStatus.FAILED,
                error=f"Error rendering page: {e}",
                elapsed_seconds=time.time() - page_start,
            )))
            return

        page = page.advance(PageStatus.TRANSLATING, original_image=image)
        self._publish(self.session.with_page(page))

        task = PageTask(page_number=page_number, image=image, text=text)
        try:
            html = with_retry(
                lambda: self.translator.translate(task, self.config),
                max_attempts=self.max_attempts,
                is_fatal=self.translator.is_fatal,
                sleep=self._sleep,
                description=f"page {page_number}",
            )
        except Exception as e:
            logger.warning("Page %d/%d failed: %s", page_number, self.session.total_pages, e)
            page = page.advance(
                PageStatus.FAILED,
                error=str(e) or type(e).__name__,
                elapsed_seconds=time.time() - page_start,
            )
        else:
            page = page.advance(
                PageStatus.COMPLETED,
                html=html,
                elapsed_seconds=time.time() - page_start,
            )
            logger.info(
                "Page %d/%d complete: %.1fs",
                page_number,
                self.session.total_pages,
                page.elapsed_seconds,
            )

        self._publish(self.session.with_page(page))
