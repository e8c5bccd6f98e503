"""pagetext.query - extract the readable text of one URL.

Basic usage::

    from pagetext.query import fetch_text

    result = fetch_text("https://example.com/blog/some-post")
    print(result.text)
    print(result.strategy)   # "default", "pdf", "telegraph", ...

Inside a running event loop::

    result = await fetch_text_async("https://example.com/blog/some-post")

Custom overrides::

    from pagetext.strategies import SelectorStrategy, default_strategy_table

    table = default_strategy_table().with_entry(
        "https://example.org/", SelectorStrategy("#story", name="example_org"),
    )
    result = fetch_text("https://example.org/news/1", table=table)
"""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagetext.browser import (
    BrowserSession,
    Sleep,
    navigate,
    open_session,
    wait_for_load_or_timeout,
)
from pagetext.errors import (
    ExtractionError,
    PageTextError,
    StrategyDeadlineError,
    TimeoutExhaustedError,
)
from pagetext.escalation import Escalation, EscalationState, LoadWaiter
from pagetext.extractors.readerable import is_probably_readerable
from pagetext.items import ExtractionRequest, ExtractionResult
from pagetext.readiness import ReadinessOracle, ReadinessProber
from pagetext.settings import Settings
from pagetext.strategies import ExtractionStrategy, StrategyTable, default_strategy_table, resolve

logger = logging.getLogger(__name__)


class Extractor:
    """Orchestrates one extraction: navigate, escalate, resolve, extract.

    The strategy table is fixed at construction and never modified.  A
    strategy chosen by :func:`~pagetext.strategies.resolve` is final: if it
    fails, the default strategy is not tried.
    """

    def __init__(
        self,
        table: StrategyTable | None = None,
        settings: Settings | None = None,
        *,
        oracle: ReadinessOracle = is_probably_readerable,
        sleep: Sleep = asyncio.sleep,
        wait_for_load: LoadWaiter = wait_for_load_or_timeout,
    ) -> None:
        self.table = table if table is not None else default_strategy_table()
        self.settings = settings or Settings()
        self._oracle = oracle
        self._sleep = sleep
        self._wait_for_load = wait_for_load

    def _deadline_for(self, strategy: ExtractionStrategy) -> float:
        if strategy.deadline is not None:
            return strategy.deadline
        return self.settings.strategy_timeout

    async def run_strategy(self, strategy: ExtractionStrategy, session: BrowserSession) -> str:
        """Run *strategy* under its deadline and normalise its failures."""
        url = session.final_url
        deadline = self._deadline_for(strategy)
        try:
            return await asyncio.wait_for(strategy.extract(session), timeout=deadline)
        except (asyncio.TimeoutError, PlaywrightTimeoutError) as exc:
            raise StrategyDeadlineError(
                f"Strategy {strategy.name!r} gave up on {url} after {deadline:.1f}s",
                url=url,
                deadline=deadline,
            ) from exc
        except PageTextError:
            raise
        except Exception as exc:
            raise ExtractionError(
                f"Strategy {strategy.name!r} failed on {url}: {exc}", url=url,
            ) from exc

    async def extract(self, session: BrowserSession, request: ExtractionRequest) -> ExtractionResult:
        """Extract the text of ``request.url`` using *session*.

        Raises:
            NavigationError: the page could not be loaded.
            TimeoutExhaustedError: the page never became reader-ready.
            StrategyDeadlineError: the selected strategy ran out of time.
            ExtractionError: the selected strategy failed otherwise.
        """
        outcome = await navigate(
            session,
            request,
            timeout=self.settings.navigation_timeout,
            download_types=self.table.content_types,
        )
        logger.info(
            "navigated to %s (HTTP %d, %s)",
            outcome.final_url, outcome.status, outcome.content_type or "no content-type",
        )

        escalation = Escalation(
            ReadinessProber(self.table, self._oracle),
            self.settings.timeouts,
            sleep=self._sleep,
            wait_for_load=self._wait_for_load,
        )
        state = await escalation.run(session)
        if state is EscalationState.EXHAUSTED:
            total = escalation.timeouts.total
            raise TimeoutExhaustedError(
                f"{session.final_url} was not readerable within {total:.1f}s",
                url=session.final_url,
                total_timeout=total,
            )

        strategy = resolve(self.table, session.final_url, session.content_type)
        logger.info("extracting %s with %r", session.final_url, strategy.name)
        text = await self.run_strategy(strategy, session)
        return ExtractionResult(text=text, url=session.final_url, strategy=strategy.name)


async def fetch_text_async(
    url: str,
    *,
    settings: Settings | None = None,
    table: StrategyTable | None = None,
) -> ExtractionResult:
    """Open a browser session, extract *url*, close the session.

    The URL is validated before the browser is launched.
    """
    request = ExtractionRequest.from_url(url)
    settings = settings or Settings.from_env()
    extractor = Extractor(table, settings)
    async with open_session(settings) as session:
        return await extractor.extract(session, request)


def fetch_text(
    url: str,
    *,
    settings: Settings | None = None,
    table: StrategyTable | None = None,
) -> ExtractionResult:
    """Synchronous wrapper around :func:`fetch_text_async`."""
    return asyncio.run(fetch_text_async(url, settings=settings, table=table))
