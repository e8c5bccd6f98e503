"""Readiness probing: is the rendered page extractable right now?"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from pagetext.extractors.readerable import is_probably_readerable
from pagetext.items import ReadinessState

if TYPE_CHECKING:
    from pagetext.browser import BrowserSession
    from pagetext.strategies import StrategyTable

logger = logging.getLogger(__name__)

ReadinessOracle = Callable[[BeautifulSoup], bool]
DocumentParser = Callable[[str], BeautifulSoup]


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


@dataclass(frozen=True)
class SessionDocument:
    """A serialized snapshot of the rendered page at one readiness check."""

    url: str
    html: str
    soup: BeautifulSoup


async def take_snapshot(
    session: BrowserSession,
    parse: DocumentParser = parse_html,
) -> SessionDocument:
    """Serialize the page in *session*, parse it, and store it as ``session.document``."""
    html: str = await session.page.content()
    document = SessionDocument(url=session.final_url, html=html, soup=parse(html))
    session.document = document
    return document


class ReadinessProber:
    """Answers READY / NOT_READY for the current state of a session.

    Pages covered by a strategy-table key are READY without inspection: those
    strategies do their own waiting.  Everything else is serialized, parsed
    and handed to the readability heuristic.
    """

    def __init__(
        self,
        table: StrategyTable,
        oracle: ReadinessOracle = is_probably_readerable,
        parse: DocumentParser = parse_html,
    ) -> None:
        self._table = table
        self._oracle = oracle
        self._parse = parse
        self.probes = 0

    async def probe(self, session: BrowserSession, final_url: str) -> ReadinessState:
        self.probes += 1
        if self._table.has_override(final_url, session.content_type):
            logger.debug("probe #%d: %s handled by a custom strategy", self.probes, final_url)
            return ReadinessState.READY

        document = await take_snapshot(session, self._parse)
        ready = bool(self._oracle(document.soup))
        logger.debug(
            "probe #%d: %s is %s (%d bytes of HTML)",
            self.probes, final_url, "readerable" if ready else "not readerable",
            len(document.html),
        )
        return ReadinessState.READY if ready else ReadinessState.NOT_READY
