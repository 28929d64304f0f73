"""Randomized pacing between mission completion attempts.

Every finish request is followed by a pause drawn uniformly from a closed
millisecond window (2000-5000 ms by default), including after the last
mission of an account. This is the only pacing towards the remote service;
there is no adaptive backoff.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dealr_bot.reporting.console import StatusReporter

logger = logging.getLogger(__name__)


class MissionThrottle:
    """Draws and waits out the delay between mission attempts.

    Args:
        min_ms: Lower bound of the delay window, inclusive.
        max_ms: Upper bound of the delay window, inclusive.
        rng: Random source, injectable for deterministic tests.
        sleep: Async sleep function, injectable so tests do not wait.
    """

    def __init__(
        self,
        min_ms: int = 2000,
        max_ms: int = 5000,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        if min_ms < 0 or max_ms < min_ms:
            raise ValueError(f"Invalid delay window [{min_ms}, {max_ms}] ms")
        self._min_ms = min_ms
        self._max_ms = max_ms
        self._rng = rng or random.Random()
        self._sleep = sleep

    @property
    def window(self) -> tuple[int, int]:
        return self._min_ms, self._max_ms

    def next_delay_ms(self) -> int:
        """Integer delay uniformly distributed in ``[min_ms, max_ms]``."""
        return self._rng.randint(self._min_ms, self._max_ms)

    async def wait(self, reporter: StatusReporter | None = None) -> int:
        """Pause for a fresh random delay and return it in milliseconds."""
        delay_ms = self.next_delay_ms()
        logger.debug("Throttling %d ms before next mission", delay_ms)

        if reporter is not None:
            await reporter.countdown(delay_ms, self._sleep)
        else:
            await self._sleep(delay_ms / 1000)

        return delay_ms
