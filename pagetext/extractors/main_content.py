"""Main content extraction for the default strategy.

Tier 1: readability-lxml  (Mozilla Readability algorithm)
Tier 2: trafilatura       (second-opinion extractor, plain-text output)
Tier 3: visible body text (last resort, never empty-handed on a real page)
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)

# Minimum words for a tier's output to be accepted
_READABILITY_MIN_WORDS = 30
_TRAFILATURA_MIN_WORDS = 20

_NON_TEXT_TAGS: tuple[str, ...] = ("script", "style", "noscript", "template", "svg")

# Elements whose boundaries become line breaks in plain text
_BLOCK_TAGS: tuple[str, ...] = (
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
    "tr", "ul",
)

# Consent overlays readability sometimes mistakes for the article
_CONSENT_SELECTORS: tuple[str, ...] = (
    "#onetrust-consent-sdk",
    "#CybotCookiebotDialog",
    "#cookie-law-info-bar",
    "#cmplz-cookiebanner-container",
    ".cookie-banner",
    ".cookie-notice",
    ".cookie-consent",
    ".gdpr-banner",
)

_BLANK_RUN = re.compile(r"\n{3,}")
_WHITESPACE = re.compile(r"\s+")


class MainText(NamedTuple):
    text: str
    method: str


def _preprocess_html(html: str, soup: BeautifulSoup | None = None) -> BeautifulSoup | None:
    """Drop ``<template>`` blocks and cookie-consent overlays.

    An already parsed *soup* of *html* is cleaned in place instead of
    parsing the markup again.  Returns None when *html* cannot be parsed.
    """
    if soup is None:
        html = re.sub(
            r"<template\b[^>]*>.*?</template>",
            "",
            html,
            flags=re.DOTALL | re.IGNORECASE,
        )
        try:
            soup = BeautifulSoup(html, "lxml")
        except Exception as exc:
            logger.debug("HTML pre-processing failed: %s", exc)
            return None
    else:
        for el in soup.find_all("template"):
            el.decompose()
    for selector in _CONSENT_SELECTORS:
        for el in soup.select(selector):
            if isinstance(el, Tag):
                el.decompose()
    return soup


def _tag_text(root: Tag) -> str:
    # Mutates root: only block boundaries become line breaks.
    for tag_name in _NON_TEXT_TAGS:
        for el in root.find_all(tag_name):
            el.decompose()
    for node in root.find_all(string=True):
        if type(node) is NavigableString and node.find_parent("pre") is None:
            node.replace_with(_WHITESPACE.sub(" ", node))
    for br in root.find_all("br"):
        br.replace_with("\n")
    for el in root.find_all(list(_BLOCK_TAGS)):
        el.insert_before("\n")
        el.append("\n")
    for el in root.find_all(["td", "th"]):
        el.append(" ")
    lines = (" ".join(line.split()) for line in root.get_text().splitlines())
    text = "\n".join(lines)
    return _BLANK_RUN.sub("\n\n", text).strip()


def html_to_text(html: str) -> str:
    """Project an HTML fragment onto plain text, one block per line.

    Inline markup (links, emphasis, code) stays on its sentence's line.
    """
    return _tag_text(BeautifulSoup(html, "lxml"))


def _count_words(text: str) -> int:
    return len(text.split())


# ---------------------------------------------------------------------------
# Tier 1: readability-lxml
# ---------------------------------------------------------------------------

def _try_readability(html: str, url: str = "") -> str | None:
    try:
        from readability import Document  # type: ignore[import-untyped]

        summary = Document(html, url=url or None).summary(html_partial=True)
        text = html_to_text(summary)
        if _count_words(text) >= _READABILITY_MIN_WORDS:
            return text
    except Exception as exc:
        logger.debug("readability failed: %s", exc)
    return None


# ---------------------------------------------------------------------------
# Tier 2: trafilatura
# ---------------------------------------------------------------------------

def _try_trafilatura(html: str, url: str = "") -> str | None:
    try:
        import trafilatura  # type: ignore[import-untyped]

        text = trafilatura.extract(
            html,
            url=url or None,
            output_format="txt",
            include_comments=False,
            include_tables=True,
            favor_recall=True,
        )
        if text and _count_words(text) >= _TRAFILATURA_MIN_WORDS:
            return text.strip()
    except Exception as exc:
        logger.debug("trafilatura failed: %s", exc)
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_main_text(html: str, url: str = "", soup: BeautifulSoup | None = None) -> MainText:
    """Return the readable main text of *html*.

    readability-lxml is preferred; trafilatura is consulted only when
    readability yields too little.  When both come back short the visible
    ``<body>`` text is returned so the caller always gets the page's words.

    *soup*, when given, must be the parse of *html*; it is consumed
    (modified in place) rather than parsing the page a second time.
    """
    cleaned = _preprocess_html(html, soup)
    if cleaned is not None:
        html = str(cleaned)

    text = _try_readability(html, url)
    if text is not None:
        return MainText(text=text, method="readability")

    text = _try_trafilatura(html, url)
    if text is not None:
        logger.debug("readability too short, trafilatura used for %s", url)
        return MainText(text=text, method="trafilatura")

    logger.debug("falling back to body text for %s", url)
    if cleaned is None:
        return MainText(text=html_to_text(html), method="body_text")
    body = cleaned.find("body")
    return MainText(text=_tag_text(body if isinstance(body, Tag) else cleaned), method="body_text")
