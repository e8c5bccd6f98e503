"""Runtime settings for pagetext.

Defaults live here as module constants.  ``Settings.from_env()`` applies
``PAGETEXT_*`` environment overrides; the CLI applies its flags on top.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

# ---------------------------------------------------------------------------
# Escalation timing (seconds)
# ---------------------------------------------------------------------------
ONLOAD_TIMEOUT = 5.0
TOTAL_TIMEOUT = 12.0  # expected >= ONLOAD_TIMEOUT; a smaller value clamps the second wait to 0

# Applied to strategies that do not declare their own deadline.
STRATEGY_TIMEOUT = 30.0

# Upper bound for page.goto() to return a response at all.
NAVIGATION_TIMEOUT = 30.0

# ---------------------------------------------------------------------------
# Browser
# ---------------------------------------------------------------------------
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

VIEWPORT = {"width": 1920, "height": 1080}

CHROMIUM_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
)

HEADLESS = True

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = "WARNING"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_log_level(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip().upper()
    if raw not in logging.getLevelNamesMapping():
        return default
    return raw


@dataclass(frozen=True)
class Timeouts:
    """The two escalation deadlines, T1 and T2."""

    onload: float = ONLOAD_TIMEOUT
    total: float = TOTAL_TIMEOUT

    @property
    def second_stage(self) -> float:
        """Extra wait before the second probe; never negative."""
        return max(0.0, self.total - self.onload)


@dataclass(frozen=True)
class Settings:
    onload_timeout: float = ONLOAD_TIMEOUT
    total_timeout: float = TOTAL_TIMEOUT
    strategy_timeout: float = STRATEGY_TIMEOUT
    navigation_timeout: float = NAVIGATION_TIMEOUT
    user_agent: str = USER_AGENT
    headless: bool = HEADLESS
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            onload_timeout=_env_float("PAGETEXT_ONLOAD_TIMEOUT", ONLOAD_TIMEOUT),
            total_timeout=_env_float("PAGETEXT_TOTAL_TIMEOUT", TOTAL_TIMEOUT),
            strategy_timeout=_env_float("PAGETEXT_STRATEGY_TIMEOUT", STRATEGY_TIMEOUT),
            navigation_timeout=_env_float("PAGETEXT_NAVIGATION_TIMEOUT", NAVIGATION_TIMEOUT),
            user_agent=os.environ.get("PAGETEXT_USER_AGENT") or USER_AGENT,
            headless=os.environ.get("PAGETEXT_HEADLESS", "1") != "0",
            log_level=_env_log_level("PAGETEXT_LOG_LEVEL", LOG_LEVEL),
        )

    @property
    def timeouts(self) -> Timeouts:
        return Timeouts(onload=self.onload_timeout, total=self.total_timeout)

    def override(self, **changes: object) -> Settings:
        """Return a copy with every non-None value in *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
