"""PDF byte-stream to text."""

from __future__ import annotations

import logging

import pymupdf

from pagetext.errors import ExtractionError

logger = logging.getLogger(__name__)

MAX_PAGES = 500


def pdf_to_text(data: bytes, url: str = "", max_pages: int = MAX_PAGES) -> str:
    """Decode a PDF document held in *data* and return its text, page by page.

    Raises:
        ExtractionError: if *data* is not a readable PDF.
    """
    if not data:
        raise ExtractionError("Empty PDF body", url=url)
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise ExtractionError(f"Could not open PDF from {url}: {exc}", url=url) from exc

    try:
        parts = []
        for page_num, page in enumerate(doc):
            if page_num >= max_pages:
                logger.warning("PDF %s truncated at %d pages", url, max_pages)
                break
            parts.append(page.get_text())
    finally:
        doc.close()

    return "\n".join(parts)
