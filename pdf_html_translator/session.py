"""
Document session state: overall progress and per-page results.

Every record here is immutable. The pipeline replaces the whole
session on each page transition, so an observer always holds a
coherent snapshot.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


class AppState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class PageStatus(Enum):
    PENDING = "pending"
    TRANSLATING = "translating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PageStatus.COMPLETED, PageStatus.FAILED)

    @property
    def rank(self) -> int:
        # COMPLETED and FAILED share a rank: both are final
        return {"pending": 0, "translating": 1, "completed": 2, "failed": 2}[self.value]


@dataclass(frozen=True)
class PageResult:
    """State of a single page."""
    page_number: int
    status: PageStatus = PageStatus.PENDING
    original_image: Optional[str] = None
    html: Optional[str] = None
    error: Optional[str] = None
    elapsed_seconds: float = 0.0

    def advance(self, status: PageStatus, **changes) -> "PageResult":
        """Return a copy moved forward to ``status``; regressions are rejected."""
        if self.status.is_terminal or status.rank < self.status.rank:
            raise ValueError(
                f"Page {self.page_number} cannot move from "
                f"{self.status.value} to {status.value}"
            )
        return replace(self, status=status, **changes)


@dataclass(frozen=True)
class Progress:
    current: int
    total: int

    @property
    def fraction(self) -> float:
        return self.current / max(self.total, 1)


@dataclass(frozen=True)
class DocumentSession:
    """Snapshot of a whole document run."""
    total_pages: int = 0
    pages: tuple[PageResult, ...] = field(default_factory=tuple)
    current: int = 0
    total_time_seconds: Optional[float] = None

    @classmethod
    def start(cls, total_pages: int) -> "DocumentSession":
        """A fresh session with one pending result per page."""
        return cls(
            total_pages=total_pages,
            pages=tuple(PageResult(page_number=i + 1) for i in range(total_pages)),
        )

    @property
    def progress(self) -> Progress:
        return Progress(self.current, self.total_pages)

    def page(self, page_number: int) -> PageResult:
        return self.pages[page_number - 1]

    def with_page(self, page: PageResult) -> "DocumentSession":
        """Return a new session with ``page`` replacing its predecessor."""
        index = page.page_number - 1
        previous = self.pages[index]
        current = self.current
        if page.status.is_terminal and not previous.status.is_terminal:
            current += 1
        pages = self.pages[:index] + (page,) + self.pages[index + 1:]
        return replace(self, pages=pages, current=current)

    def finished(self, total_time_seconds: float) -> "DocumentSession":
        return replace(self, total_time_seconds=total_time_seconds)

    @property
    def completed_pages(self) -> list[PageResult]:
        return [p for p in self.pages if p.status is PageStatus.COMPLETED]

    @property
    def failed_pages(self) -> list[PageResult]:
        return [p for p in self.pages if p.status is PageStatus.FAILED]

    @property
    def is_finished(self) -> bool:
        return self.current == self.total_pages

    def to_dict(self) -> dict:
        """Convert to a serializable dictionary."""
        return {
            "total_pages": self.total_pages,
            "current": self.current,
            "total_time_seconds": self.total_time_seconds,
            "pages": [
                {
                    "page_number": p.page_number,
                    "status": p.status.value,
                    "html": p.html,
                    "error": p.error,
                    "elapsed_seconds": p.elapsed_seconds,
                }
                for p in self.pages
            ],
        }
