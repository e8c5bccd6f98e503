"""Shared pytest fixtures and in-memory stand-ins for Playwright objects."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def jsapp_html() -> str:
    return _read_fixture("jsapp.html")


@pytest.fixture
def hidden_html() -> str:
    return _read_fixture("hidden.html")


# ---------------------------------------------------------------------------
# Playwright doubles
# ---------------------------------------------------------------------------

async def _forever() -> None:
    await asyncio.Event().wait()


class FakeResponse:
    """Covers both ``Response`` (navigation) and ``APIResponse`` (request context)."""

    def __init__(
        self,
        url: str,
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
        body: bytes = b"<html></html>",
    ) -> None:
        self.url = url
        self.status = status
        self.headers = {"content-type": content_type} if content_type else {}
        self._body = body
        self.disposed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def body(self) -> bytes:
        return self._body

    async def dispose(self) -> None:
        self.disposed = True


class FakeRequestContext:
    def __init__(self, responses: dict[str, FakeResponse] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []

    async def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        if url not in self.responses:
            raise ConnectionError(f"no route to {url}")
        return self.responses[url]


class FakeElement:
    def __init__(self, text: str) -> None:
        self.text = text

    async def inner_text(self) -> str:
        return self.text


class FakeFrame:
    def __init__(self, url: str, selectors: dict[str, str] | None = None) -> None:
        self.url = url
        self.selectors = selectors or {}

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> FakeElement:
        if selector not in self.selectors:
            await _forever()
        return FakeElement(self.selectors[selector])


class FakePage:
    """Minimal async ``Page``.

    ``html_states`` are returned by successive ``content()`` calls, the last
    one repeating, to imitate a page that keeps rendering between probes.
    """

    def __init__(
        self,
        html_states: list[str] | None = None,
        *,
        final_url: str | None = None,
        response: FakeResponse | None = None,
        goto_error: Exception | None = None,
        load_fires: bool = True,
        selectors: dict[str, str] | None = None,
        frames: list[FakeFrame] | None = None,
        request: FakeRequestContext | None = None,
    ) -> None:
        self.html_states = list(html_states or ["<html><body></body></html>"])
        self.final_url = final_url
        self.response = response
        self.goto_error = goto_error
        self.load_fires = load_fires
        self.selectors = selectors or {}
        self.frames = frames if frames is not None else []
        self.request = request or FakeRequestContext()
        self.url = "about:blank"
        self.content_calls = 0
        self.goto_calls: list[tuple[str, dict]] = []

    async def goto(self, url: str, **kwargs: Any) -> FakeResponse | None:
        self.goto_calls.append((url, kwargs))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = self.final_url or url
        if self.response is None:
            return FakeResponse(self.url)
        return self.response

    async def content(self) -> str:
        index = min(self.content_calls, len(self.html_states) - 1)
        self.content_calls += 1
        return self.html_states[index]

    async def wait_for_load_state(self, state: str = "load", **kwargs: Any) -> None:
        if not self.load_fires:
            await _forever()

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> FakeElement:
        if selector not in self.selectors:
            await _forever()
        return FakeElement(self.selectors[selector])


class SleepRecorder:
    """Drop-in for ``asyncio.sleep`` that returns at once and logs durations."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
        await asyncio.sleep(0)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_frame():
    return FakeFrame


@pytest.fixture
def make_request_context():
    return FakeRequestContext


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
