"""Cheap "is this page worth running the article extractor on?" check.

Scores visible ``<p>``, ``<pre>`` and ``<article>`` nodes (plus ``<div>``
elements that hold bare ``<br>`` line breaks) by their text length and
answers ``True`` as soon as the running score clears a threshold.  Meant to
be called repeatedly on a page that is still rendering, so it never runs
the full extraction.
"""

from __future__ import annotations

import math
import re

from bs4 import BeautifulSoup, Tag

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_CONTENT_LENGTH = 140
MIN_SCORE = 20.0

_UNLIKELY_CANDIDATES = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|"
    r"extra|footer|gdpr|header|legends|menu|related|remark|replies|rss|shoutbox|"
    r"sidebar|skyscraper|social|sponsor|supplemental|ad-break|agegate|pagination|"
    r"pager|popup|yom-remote",
    re.IGNORECASE,
)

_MAYBE_CANDIDATE = re.compile(
    r"and|article|body|column|content|main|shadow",
    re.IGNORECASE,
)

_DISPLAY_NONE = re.compile(r"display\s*:\s*none", re.IGNORECASE)


def _is_visible(tag: Tag) -> bool:
    if _DISPLAY_NONE.search(str(tag.get("style") or "")):
        return False
    if tag.has_attr("hidden"):
        return False
    if str(tag.get("aria-hidden") or "") == "true":
        return "fallback-image" in " ".join(tag.get("class") or [])
    return True


def _candidate_nodes(soup: BeautifulSoup) -> list[Tag]:
    nodes: list[Tag] = [t for t in soup.find_all(["p", "pre", "article"]) if isinstance(t, Tag)]
    seen = {id(n) for n in nodes}
    for br in soup.select("div > br"):
        parent = br.parent
        if isinstance(parent, Tag) and id(parent) not in seen:
            seen.add(id(parent))
            nodes.append(parent)
    return nodes


def is_probably_readerable(
    document: BeautifulSoup,
    min_content_length: int = MIN_CONTENT_LENGTH,
    min_score: float = MIN_SCORE,
) -> bool:
    """Return True if *document* probably holds an extractable body of text."""
    score = 0.0
    for node in _candidate_nodes(document):
        if not _is_visible(node):
            continue

        match_string = " ".join(node.get("class") or []) + " " + str(node.get("id") or "")
        if _UNLIKELY_CANDIDATES.search(match_string) and not _MAYBE_CANDIDATE.search(match_string):
            continue

        # Paragraphs inside list items are usually navigation or teaser lists.
        if node.name == "p" and node.find_parent("li") is not None:
            continue

        text_length = len(node.get_text().strip())
        if text_length < min_content_length:
            continue

        score += math.sqrt(text_length - min_content_length)
        if score > min_score:
            return True

    return False
