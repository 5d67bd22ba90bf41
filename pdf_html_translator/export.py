"""
Export a translated document session as a standalone HTML file.
"""

import html
import logging
import os
from pathlib import Path
from typing import Union

from pdf_html_translator.session import DocumentSession, PageResult, PageStatus

logger = logging.getLogger(__name__)

STYLE = """
body { margin: 0; background: #f1f5f9; font-family: system-ui, sans-serif; }
.page { background: #fff; max-width: 900px; margin: 24px auto; padding: 40px;
        box-shadow: 0 1px 4px rgba(0, 0, 0, 0.15); }
.page.side-by-side { max-width: 1800px; display: flex; gap: 32px; }
.page.side-by-side > * { flex: 1; min-width: 0; }
.page-number { color: #94a3b8; font-size: 0.8em; margin-bottom: 12px; }
.original img { width: 100%; border: 1px solid #e2e8f0; }
.page-error { color: #b91c1c; background: #fef2f2; border: 1px solid #fecaca;
              padding: 16px; border-radius: 6px; }
.page-pending { color: #64748b; font-style: italic; }
.image-placeholder { background: #f8fafc; border: 1px dashed #cbd5e1; color: #64748b;
                     padding: 24px; text-align: center; margin: 12px 0; }
table { border-collapse: collapse; width: 100%; margin: 12px 0; }
td, th { border: 1px solid #cbd5e1; padding: 6px 8px; }
@media print { body { background: #fff; } .page { box-shadow: none; page-break-after: always; } }
"""


def _page_body(page: PageResult) -> str:
    if page.status is PageStatus.COMPLETED:
        return page.html or ""
    if page.status is PageStatus.FAILED:
        return (
            '<div class="page-error"><strong>Translation failed.</strong> '
            f"{html.escape(page.error or 'Unknown error')}</div>"
        )
    return '<p class="page-pending">(Not translated yet)</p>'


def render_page(page: PageResult, include_originals: bool = False) -> str:
    body = _page_body(page)
    label = f'<div class="page-number">Page {page.page_number}</div>'
    if include_originals and page.original_image:
        return (
            f'<section class="page side-by-side" id="page-{page.page_number}">'
            f'<div class="original">{label}'
            f'<img src="{html.escape(page.original_image, quote=True)}" '
            f'alt="Original page {page.page_number}"></div>'
            f'<div class="translation">{body}</div>'
            "</section>"
        )
    return (
        f'<section class="page" id="page-{page.page_number}">'
        f"{label}{body}</section>"
    )


def render_html(
    session: DocumentSession,
    title: str = "Translated document",
    include_originals: bool = False,
) -> str:
    """Render every page of the session into one HTML document."""
    pages = "\n".join(render_page(p, include_originals) for p in session.pages)
    return (
        "<!DOCTYPE html>\n"
        '<html>\n<head>\n<meta charset="utf-8">\n'
        f"<title>{html.escape(title)}</title>\n"
        f"<style>{STYLE}</style>\n"
        "</head>\n<body>\n"
        f"{pages}\n"
        "</body>\n</html>\n"
    )


def save_html(
    session: DocumentSession,
    output_path: Union[str, Path],
    title: str = "Translated document",
    include_originals: bool = False,
) -> Path:
    """Write the session as HTML and return the resolved output path."""
    output_path = Path(output_path).resolve()
    os.makedirs(output_path.parent, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(render_html(session, title=title, include_originals=include_originals))
    logger.info("Output saved to: %s", output_path)
    return output_path
