"""Typed failures raised by the extraction engine.

Every error carries the URL it concerns and the process exit code the CLI
reports for it.  Only :func:`pagetext.__main__.main` turns these into exit
codes; library code just raises.
"""

from __future__ import annotations


class PageTextError(RuntimeError):
    """Base class for all pagetext failures.

    Attributes:
        url       -- the URL being extracted ("" if unknown)
        exit_code -- CLI exit status reported for this failure
    """

    exit_code = 2

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class InvalidInputError(PageTextError):
    """The URL is missing or does not use ``https://``."""

    exit_code = 1


class NavigationError(PageTextError):
    """The browser could not load the target URL."""

    exit_code = 2


class ExtractionError(PageTextError):
    """The selected strategy could not produce text."""

    exit_code = 2


class StrategyDeadlineError(ExtractionError):
    """A strategy's own deadline fired before its target structure appeared."""

    exit_code = 4

    def __init__(self, message: str, url: str = "", deadline: float | None = None) -> None:
        super().__init__(message, url=url)
        self.deadline = deadline


class TimeoutExhaustedError(PageTextError):
    """The page never became reader-ready within the total timeout.

    This is an expected outcome rather than a bug, so the CLI reports it
    without a traceback.
    """

    exit_code = 3

    def __init__(self, message: str, url: str = "", total_timeout: float = 0.0) -> None:
        super().__init__(message, url=url)
        self.total_timeout = total_timeout
