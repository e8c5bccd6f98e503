"""The two-stage readiness schedule.

::

    AWAITING_FIRST_CHECK --ready--> SUCCEEDED
            |
         not ready
            v
    AWAITING_SECOND_CHECK --ready--> SUCCEEDED
            |
         not ready
            v
        EXHAUSTED

The first check happens when the page fires ``load`` or after T1 seconds,
whichever comes first.  The second check happens ``max(0, T2 - T1)`` seconds
later.  There is no third check.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from pagetext.browser import Sleep, wait_for_load_or_timeout
from pagetext.items import ReadinessState
from pagetext.settings import Timeouts

if TYPE_CHECKING:
    from pagetext.browser import BrowserSession
    from pagetext.readiness import ReadinessProber

logger = logging.getLogger(__name__)

LoadWaiter = Callable[[Any, float, Sleep], Awaitable[bool]]


class EscalationState(Enum):
    AWAITING_FIRST_CHECK = "awaiting_first_check"
    AWAITING_SECOND_CHECK = "awaiting_second_check"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = frozenset({EscalationState.SUCCEEDED, EscalationState.EXHAUSTED})


class Escalation:
    """Runs the readiness schedule against one session.

    ``sleep`` and ``wait_for_load`` are injectable so the schedule can be
    driven without real time or a real browser.
    """

    def __init__(
        self,
        prober: ReadinessProber,
        timeouts: Timeouts | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        wait_for_load: LoadWaiter = wait_for_load_or_timeout,
    ) -> None:
        self._prober = prober
        self.timeouts = timeouts or Timeouts()
        self._sleep = sleep
        self._wait_for_load = wait_for_load
        self.state = EscalationState.AWAITING_FIRST_CHECK
        self.history: list[EscalationState] = [self.state]

    def _transition(self, new_state: EscalationState) -> None:
        logger.debug("escalation: %s -> %s", self.state.value, new_state.value)
        self.state = new_state
        self.history.append(new_state)

    async def _check(self, session: BrowserSession) -> ReadinessState:
        return await self._prober.probe(session, session.final_url)

    async def run(self, session: BrowserSession) -> EscalationState:
        """Drive the schedule to a terminal state and return it."""
        if self.state in TERMINAL_STATES:
            return self.state

        loaded = await self._wait_for_load(session.page, self.timeouts.onload, self._sleep)
        logger.debug(
            "first check after %s", "load event" if loaded else f"{self.timeouts.onload:.1f}s",
        )
        if await self._check(session) is ReadinessState.READY:
            self._transition(EscalationState.SUCCEEDED)
            return self.state

        self._transition(EscalationState.AWAITING_SECOND_CHECK)
        delay = self.timeouts.second_stage
        logger.info("page not readerable yet; checking again in %.1fs", delay)
        await self._sleep(delay)
        if await self._check(session) is ReadinessState.READY:
            self._transition(EscalationState.SUCCEEDED)
        else:
            self._transition(EscalationState.EXHAUSTED)
        return self.state
