"""Tests for pagetext.items and pagetext.settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pagetext.errors import InvalidInputError
from pagetext.items import (
    ExtractionRequest,
    NavigationOutcome,
    ReadinessState,
    normalize_content_type,
)
from pagetext.settings import Settings, Timeouts


class TestExtractionRequest:
    def test_accepts_https(self) -> None:
        req = ExtractionRequest.from_url("https://example.com/post")
        assert req.url == "https://example.com/post"

    @pytest.mark.parametrize(
        "url",
        [
            "http://example.com/",
            "ftp://example.com/file",
            "example.com",
            "HTTPS://example.com/",
            " https://example.com/",
            "file:///etc/passwd",
        ],
    )
    def test_rejects_non_https(self, url: str) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            ExtractionRequest.from_url(url)
        assert exc_info.value.exit_code == 1
        assert exc_info.value.url == url

    @pytest.mark.parametrize("url", [None, ""])
    def test_rejects_missing(self, url: str | None) -> None:
        with pytest.raises(InvalidInputError):
            ExtractionRequest.from_url(url)

    def test_is_frozen(self) -> None:
        req = ExtractionRequest.from_url("https://example.com/")
        with pytest.raises(ValidationError):
            req.url = "https://other.example/"


class TestNavigationOutcome:
    def test_content_type_parameters_stripped(self) -> None:
        outcome = NavigationOutcome(
            final_url="https://example.com/a.pdf",
            content_type="Application/PDF; charset=binary",
        )
        assert outcome.content_type == "application/pdf"

    def test_missing_content_type(self) -> None:
        outcome = NavigationOutcome(final_url="https://example.com/", content_type=None)
        assert outcome.content_type == ""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("text/html", "text/html"),
            ("text/html; charset=utf-8", "text/html"),
            ("  TEXT/HTML  ", "text/html"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize_content_type(self, raw: str | None, expected: str) -> None:
        assert normalize_content_type(raw) == expected


def test_readiness_states() -> None:
    assert {s.name for s in ReadinessState} == {"UNCHECKED", "NOT_READY", "READY"}


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.onload_timeout == 5.0
        assert s.total_timeout == 12.0
        assert s.timeouts.second_stage == 7.0

    def test_second_stage_clamps_to_zero(self) -> None:
        assert Timeouts(onload=10.0, total=4.0).second_stage == 0.0

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGETEXT_ONLOAD_TIMEOUT", "2.5")
        monkeypatch.setenv("PAGETEXT_TOTAL_TIMEOUT", "8")
        monkeypatch.setenv("PAGETEXT_LOG_LEVEL", "debug")
        monkeypatch.setenv("PAGETEXT_HEADLESS", "0")
        s = Settings.from_env()
        assert s.onload_timeout == 2.5
        assert s.total_timeout == 8.0
        assert s.log_level == "DEBUG"
        assert s.headless is False

    def test_from_env_ignores_garbage(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGETEXT_TOTAL_TIMEOUT", "soon")
        assert Settings.from_env().total_timeout == 12.0

    def test_from_env_ignores_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGETEXT_LOG_LEVEL", "verbose")
        assert Settings.from_env().log_level == "WARNING"

    def test_from_env_log_level_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGETEXT_LOG_LEVEL", "debug")
        assert Settings.from_env().log_level == "DEBUG"

    def test_override_skips_none(self) -> None:
        s = Settings().override(onload_timeout=1.0, total_timeout=None)
        assert s.onload_timeout == 1.0
        assert s.total_timeout == 12.0
