"""Extraction oracles: readiness heuristic, main-content extractor, PDF decoder."""

from .main_content import MainText, extract_main_text, html_to_text
from .pdf import pdf_to_text
from .readerable import is_probably_readerable

__all__ = [
    "MainText",
    "extract_main_text",
    "html_to_text",
    "is_probably_readerable",
    "pdf_to_text",
]
