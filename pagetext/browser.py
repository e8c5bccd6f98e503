"""Navigation: the headless Chromium session and the page load.

One :class:`BrowserSession` is opened per extraction and owned exclusively by
it.  :func:`navigate` loads the target and records where it ended up and what
content-type it declared; :func:`wait_for_load_or_timeout` races the page's
``load`` event against the first-stage timer.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pagetext import settings as defaults
from pagetext.errors import NavigationError
from pagetext.items import ExtractionRequest, NavigationOutcome, normalize_content_type

if TYPE_CHECKING:
    from pagetext.readiness import SessionDocument
    from pagetext.settings import Settings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


@dataclass
class BrowserSession:
    """The rendering context for one extraction, from navigation to final read.

    ``document`` is the snapshot taken by the most recent readiness probe; it
    is replaced on every probe.  ``download`` holds the body of a response
    Chromium would not render, fetched directly during navigation.
    """

    page: Any
    outcome: NavigationOutcome | None = None
    document: SessionDocument | None = None
    download: bytes | None = None

    @property
    def final_url(self) -> str:
        if self.outcome is not None:
            return self.outcome.final_url
        return str(self.page.url)

    @property
    def content_type(self) -> str:
        return self.outcome.content_type if self.outcome is not None else ""


@contextlib.asynccontextmanager
async def open_session(settings: Settings) -> AsyncIterator[BrowserSession]:
    """Launch headless Chromium and yield a fresh :class:`BrowserSession`."""
    try:
        from playwright.async_api import async_playwright
    except ImportError as exc:
        raise NavigationError(
            "pagetext requires playwright: pip install playwright && "
            "playwright install chromium",
        ) from exc

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(
            headless=settings.headless,
            args=list(defaults.CHROMIUM_ARGS),
        )
        try:
            context = await browser.new_context(
                user_agent=settings.user_agent,
                java_script_enabled=True,
                viewport=defaults.VIEWPORT,
                extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
            )
            page = await context.new_page()
            logger.debug("Chromium session opened (headless=%s)", settings.headless)
            yield BrowserSession(page=page)
        finally:
            with contextlib.suppress(Exception):
                await browser.close()


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

async def _probe_download(
    session: BrowserSession,
    url: str,
    timeout_ms: float,
    download_types: Collection[str],
) -> NavigationOutcome | None:
    """Fetch *url* directly when Chromium refused to render it as a page.

    Returns an outcome only if the response is OK and declares one of
    *download_types*; the body is kept on the session for the content-type
    strategy.
    """
    response = await session.page.request.get(url, timeout=timeout_ms)
    try:
        content_type = normalize_content_type(response.headers.get("content-type"))
        if response.ok and content_type in download_types:
            session.download = await response.body()
            return NavigationOutcome(
                final_url=response.url,
                content_type=content_type,
                status=response.status,
            )
        logger.debug(
            "direct fetch of %s gave HTTP %d (%s), not a known download type",
            url, response.status, content_type or "no content-type",
        )
        return None
    finally:
        with contextlib.suppress(Exception):
            await response.dispose()


async def navigate(
    session: BrowserSession,
    request: ExtractionRequest,
    *,
    timeout: float = defaults.NAVIGATION_TIMEOUT,
    download_types: Collection[str] = (),
) -> NavigationOutcome:
    """Load ``request.url`` in *session* and record the :class:`NavigationOutcome`.

    Returns as soon as the response is committed; waiting for the page to
    finish loading is the escalation's job.

    Raises:
        NavigationError: when the browser cannot reach the URL, or the server
            answers with an error status and an empty body.
    """
    url = request.url
    page = session.page
    timeout_ms = timeout * 1_000

    try:
        response = await page.goto(url, timeout=timeout_ms, wait_until="commit")
    except Exception as exc:
        logger.debug("goto failed for %s: %s", url, exc)
        outcome = None
        if download_types:
            try:
                outcome = await _probe_download(session, url, timeout_ms, download_types)
            except Exception as probe_exc:
                logger.debug("direct fetch failed for %s: %s", url, probe_exc)
        if outcome is None:
            raise NavigationError(f"Could not load {url}: {exc}", url=url) from exc
        logger.info("%s served as %s download", url, outcome.content_type)
        session.outcome = outcome
        return outcome

    if response is None:
        raise NavigationError(f"No response received for {url}", url=url)

    status = response.status
    if status >= 400:
        try:
            body = await response.body()
        except Exception:
            body = b""
        if not body.strip():
            raise NavigationError(f"HTTP {status} with empty body for {url}", url=url)
        logger.info("HTTP %d for %s, body present; continuing", status, url)

    outcome = NavigationOutcome(
        final_url=str(page.url or response.url),
        content_type=response.headers.get("content-type", ""),
        status=status,
    )
    if outcome.final_url != url:
        logger.debug("redirected: %s -> %s", url, outcome.final_url)
    session.outcome = outcome
    return outcome


# ---------------------------------------------------------------------------
# Load vs. timer race
# ---------------------------------------------------------------------------

async def first_completed(*tasks: asyncio.Future) -> set[asyncio.Future]:
    """Wait until any of *tasks* finishes, cancel and reap the rest.

    Returns the set of finished tasks.
    """
    try:
        done, _pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
    return done


async def wait_for_load_or_timeout(
    page: Any,
    timeout: float,
    sleep: Sleep = asyncio.sleep,
) -> bool:
    """Return when *page* fires ``load`` or *timeout* seconds pass, whichever is first.

    Returns True if the load event won the race.
    """
    load = asyncio.ensure_future(page.wait_for_load_state("load", timeout=0))
    timer = asyncio.ensure_future(sleep(timeout))
    done = await first_completed(load, timer)

    if load in done and not load.cancelled():
        exc = load.exception()
        if exc is None:
            logger.debug("load event fired before the %.1fs timer", timeout)
            return True
        logger.debug("waiting for load failed: %s", exc)
        return False
    logger.debug("load event not seen within %.1fs", timeout)
    return False
