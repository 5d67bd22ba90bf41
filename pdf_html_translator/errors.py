"""
Error taxonomy for the PDF → HTML translation pipeline.

Two families matter to the pipeline:
    - Page-level TranslationError, classified FATAL or RETRYABLE, which the
      retry engine inspects and the orchestrator records on a single page.
    - Document-level DocumentLoadError, which ends the whole run.
"""

from enum import Enum
from typing import Optional


class PDFTranslatorError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(PDFTranslatorError):
    """The translation configuration is missing or invalid."""


class DocumentLoadError(PDFTranslatorError):
    """The document could not be opened or its page count determined."""


class ErrorClassification(Enum):
    FATAL = "fatal"
    RETRYABLE = "retryable"


class TranslationError(PDFTranslatorError):
    """A single translation call failed."""

    def __init__(
        self,
        message: str,
        classification: ErrorClassification = ErrorClassification.RETRYABLE,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.classification = classification
        self.status_code = status_code

    @property
    def is_fatal(self) -> bool:
        return self.classification is ErrorClassification.FATAL

    def __repr__(self) -> str:
        return (
            f"TranslationError({self.message!r}, "
            f"classification={self.classification.value}, "
            f"status_code={self.status_code})"
        )
