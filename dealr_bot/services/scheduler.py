"""Scheduler loop: one pass over all accounts, then a long sleep, forever.

State machine:
- RUNNING_BATCH → SLEEPING: after the last account of the cycle, whatever
  the individual outcomes
- SLEEPING → RUNNING_BATCH: after the cycle interval elapses
- any → STOPPED: ``stop()`` was called or ``max_cycles`` was reached

The sleep is a cancellable timer: ``stop()`` ends it immediately. Progress
is not persisted, a restart always begins at account 0.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from dealr_bot.models.schemas import SessionResult
from dealr_bot.proxy.manager import ProxyPool
from dealr_bot.reporting.console import StatusReporter
from dealr_bot.services.account_processor import AccountProcessor

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Scheduler loop states."""

    RUNNING_BATCH = "running_batch"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class Scheduler:
    """Runs the account processor over every token on a fixed cycle.

    Parameters
    ----------
    processor:
        Processes a single account.
    tokens:
        Account tokens in processing order.
    proxy_pool:
        Pool pairing account ``i`` with proxy ``i mod M``.
    interval_seconds:
        Pause between the end of one cycle and the start of the next.
    reporter:
        Operator console.
    """

    def __init__(
        self,
        *,
        processor: AccountProcessor,
        tokens: list[str],
        proxy_pool: ProxyPool,
        interval_seconds: float = 86400,
        reporter: StatusReporter,
    ) -> None:
        self._processor = processor
        self._tokens = list(tokens)
        self._proxy_pool = proxy_pool
        self._interval_seconds = interval_seconds
        self._reporter = reporter

        self._stop_event = asyncio.Event()
        self.state = SchedulerState.STOPPED
        self.cycles_completed = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Request a graceful stop. The current account finishes first."""
        if not self._stop_event.is_set():
            logger.info("Stop requested")
        self._stop_event.set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    async def run(self, max_cycles: int | None = None) -> None:
        """Run cycles until stopped, or until ``max_cycles`` cycles are done.

        The final cycle of a bounded run does not sleep afterwards.
        """
        logger.info("Scheduler started with %d accounts", len(self._tokens))
        try:
            while not self.stopping:
                self.state = SchedulerState.RUNNING_BATCH
                await self.run_cycle()
                self.cycles_completed += 1

                if max_cycles is not None and self.cycles_completed >= max_cycles:
                    break
                if self.stopping:
                    break

                self.state = SchedulerState.SLEEPING
                self._reporter.waiting_next_cycle(int(self._interval_seconds))
                await self._sleep(self._interval_seconds)
        finally:
            self.state = SchedulerState.STOPPED
            logger.info("Scheduler stopped after %d cycles", self.cycles_completed)

    async def run_cycle(self) -> list[SessionResult | None]:
        """Process every account once, in order."""
        total = len(self._tokens)
        results: list[SessionResult | None] = []

        for index, token in enumerate(self._tokens):
            if self.stopping:
                break
            proxy = self._proxy_pool.for_account(index)
            self._reporter.account_header(index, total)
            results.append(await self._processor.process(token, proxy, index))

        return results

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _sleep(self, seconds: float) -> None:
        """Wait for ``seconds`` or until ``stop()`` is called."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
