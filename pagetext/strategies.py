"""Extraction strategies and the table that selects between them.

A :class:`StrategyTable` maps keys to strategies.  A key that looks like a
URL (``https://...``) is a prefix matched against the final page URL; any
other key is a content-type matched exactly.  URL keys always win over
content-type keys, so a site override still applies when that site serves,
say, ``application/pdf``.  Pages matching no key use the table's default
strategy, which runs the generic main-content extractor.

Usage::

    from pagetext.strategies import SelectorStrategy, default_strategy_table

    table = default_strategy_table().with_entry(
        "https://example.org/docs/", SelectorStrategy("main .doc-body"),
    )
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pagetext.errors import ExtractionError
from pagetext.extractors.main_content import MainText, extract_main_text
from pagetext.extractors.pdf import pdf_to_text
from pagetext.readiness import take_snapshot

if TYPE_CHECKING:
    from pagetext.browser import BrowserSession

logger = logging.getLogger(__name__)

_URL_KEY_PREFIXES = ("https://", "http://")


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class ExtractionStrategy(Protocol):
    """Produces the page text from a navigated session.

    ``deadline`` is the number of seconds the strategy may take before it is
    abandoned; ``None`` means the engine's global strategy timeout applies.
    """

    name: str
    deadline: float | None

    async def extract(self, session: BrowserSession) -> str:
        ...


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SelectorStrategy:
    """Site override: wait for a known content container, read its text."""

    selector: str
    name: str = "selector"
    deadline: float | None = 10.0

    async def extract(self, session: BrowserSession) -> str:
        handle = await session.page.wait_for_selector(
            self.selector, state="attached", timeout=0,
        )
        if handle is None:
            raise ExtractionError(f"{self.selector!r} not found", url=session.final_url)
        text: str = await handle.inner_text()
        logger.debug("%s: %d chars from %r", self.name, len(text), self.selector)
        return text


@dataclass(frozen=True)
class FrameStrategy:
    """Site override for content rendered inside an embedded frame.

    Polls the page's frames until one whose URL matches ``frame_url`` exists,
    then waits inside that frame for ``selector``.  The frame is allowed to be
    missing or still on ``about:blank`` for a while.
    """

    frame_url: str
    selector: str
    name: str = "frame"
    deadline: float | None = 5.0
    poll_interval: float = 0.25
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, compare=False)

    async def _wait_for_frame(self, page: Any) -> Any:
        pattern = re.compile(self.frame_url)
        while True:
            for frame in page.frames:
                if pattern.search(frame.url or ""):
                    return frame
            await self.sleep(self.poll_interval)

    async def extract(self, session: BrowserSession) -> str:
        frame = await self._wait_for_frame(session.page)
        logger.debug("%s: frame attached at %s", self.name, frame.url)
        handle = await frame.wait_for_selector(self.selector, state="attached", timeout=0)
        if handle is None:
            raise ExtractionError(
                f"{self.selector!r} not found in frame {frame.url}", url=session.final_url,
            )
        text: str = await handle.inner_text()
        return text


@dataclass(frozen=True)
class PdfStrategy:
    """Content-type override: decode the bytes at the final URL as PDF."""

    name: str = "pdf"
    deadline: float | None = 30.0

    async def extract(self, session: BrowserSession) -> str:
        url = session.final_url
        data = session.download
        if data is None:
            response = await session.page.request.get(url)
            try:
                if not response.ok:
                    raise ExtractionError(f"HTTP {response.status} fetching PDF {url}", url=url)
                data = await response.body()
            finally:
                await response.dispose()
        logger.debug("%s: decoding %d bytes from %s", self.name, len(data), url)
        return pdf_to_text(data, url=url)


@dataclass(frozen=True)
class DefaultStrategy:
    """Runs the main-content extractor over the readiness snapshot.

    The snapshot's parsed tree is handed to the extractor and consumed there.
    """

    extractor: Callable[..., MainText] = field(default=extract_main_text, compare=False)
    name: str = "default"
    deadline: float | None = None

    async def extract(self, session: BrowserSession) -> str:
        document = session.document
        if document is None:
            document = await take_snapshot(session)
        result = self.extractor(document.html, document.url, soup=document.soup)
        logger.debug("default: %d chars via %s", len(result.text), result.method)
        return result.text


# ---------------------------------------------------------------------------
# Table and resolution
# ---------------------------------------------------------------------------

def is_url_key(key: str) -> bool:
    return key.startswith(_URL_KEY_PREFIXES)


def _normalize_key(key: str) -> str:
    return key if is_url_key(key) else key.lower()


class StrategyTable(Mapping[str, ExtractionStrategy]):
    """Immutable, ordered key -> strategy lookup plus a default strategy."""

    def __init__(
        self,
        entries: Iterable[tuple[str, ExtractionStrategy]] = (),
        default: ExtractionStrategy | None = None,
    ) -> None:
        items: dict[str, ExtractionStrategy] = {}
        for key, strategy in entries:
            if not key:
                raise ValueError("strategy key must not be empty")
            items[_normalize_key(key)] = strategy
        self._entries: tuple[tuple[str, ExtractionStrategy], ...] = tuple(items.items())
        self._default = default if default is not None else DefaultStrategy()

    def __getitem__(self, key: str) -> ExtractionStrategy:
        wanted = _normalize_key(key)
        for k, strategy in self._entries:
            if k == wanted:
                return strategy
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        keys = ", ".join(k for k, _ in self._entries)
        return f"StrategyTable([{keys}], default={self._default.name})"

    @property
    def default(self) -> ExtractionStrategy:
        return self._default

    @property
    def content_types(self) -> frozenset[str]:
        return frozenset(k for k, _ in self._entries if not is_url_key(k))

    def with_entry(self, key: str, strategy: ExtractionStrategy) -> StrategyTable:
        """Return a new table with *key* added (or replaced) at the end."""
        entries = [(k, s) for k, s in self._entries if k != key]
        entries.append((key, strategy))
        return StrategyTable(entries, default=self._default)

    def match_url(self, final_url: str) -> ExtractionStrategy | None:
        for key, strategy in self._entries:
            if is_url_key(key) and final_url.startswith(key):
                return strategy
        return None

    def match_content_type(self, content_type: str) -> ExtractionStrategy | None:
        if not content_type:
            return None
        content_type = content_type.lower()
        for key, strategy in self._entries:
            if not is_url_key(key) and key == content_type:
                return strategy
        return None

    def has_override(self, final_url: str, content_type: str) -> bool:
        """True if either key kind matches, i.e. the default would not be used."""
        return (
            self.match_url(final_url) is not None
            or self.match_content_type(content_type) is not None
        )


def resolve(table: StrategyTable, final_url: str, content_type: str) -> ExtractionStrategy:
    """Pick the one strategy for a page.

    Order: first URL-prefix key matching *final_url*, then the content-type
    key equal to *content_type*, then ``table.default``.
    """
    strategy = table.match_url(final_url)
    if strategy is None:
        strategy = table.match_content_type(content_type)
    if strategy is None:
        strategy = table.default
    return strategy


def default_strategy_table() -> StrategyTable:
    """The built-in overrides shipped with pagetext."""
    return StrategyTable(
        [
            (
                "https://telegra.ph/",
                SelectorStrategy("article.tl_article_content", name="telegraph", deadline=10.0),
            ),
            (
                "https://t.me/",
                FrameStrategy(
                    r"^https://t\.me/.+[?&]embed=1",
                    ".tgme_widget_message_text",
                    name="telegram_post",
                    deadline=5.0,
                ),
            ),
            ("application/pdf", PdfStrategy(deadline=30.0)),
        ],
    )
