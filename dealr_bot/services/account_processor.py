"""Account processor: runs the mission workflow for one account.

Sequence, strictly one call at a time:
identity → public IP → missions → partition by status → report →
complete each incomplete mission (with a randomized pause after every
attempt) → point balance → finish banner.

A failed identity fetch ends processing of that account. Every other failure
is reported and the workflow moves on. Nothing raised here reaches the
scheduler except cancellation.
"""

from __future__ import annotations

import asyncio
import logging

from dealr_bot.integration.dealr_client import DealrClient
from dealr_bot.models.schemas import Mission, MissionPartition, SessionResult
from dealr_bot.proxy.types import ProxyEndpoint
from dealr_bot.reporting.console import StatusReporter
from dealr_bot.resilience.throttle import MissionThrottle

logger = logging.getLogger(__name__)


def partition_missions(missions: list[Mission]) -> MissionPartition:
    """Split missions by status, keeping the fetched order in each group.

    ``completed`` goes to the completed group, ``not_completed`` and
    ``in_progress`` form the work queue, anything else is set aside.
    """
    completed: list[Mission] = []
    incomplete: list[Mission] = []
    unrecognized: list[Mission] = []

    for mission in missions:
        if mission.is_completed:
            completed.append(mission)
        elif mission.is_incomplete:
            incomplete.append(mission)
        else:
            unrecognized.append(mission)

    return MissionPartition(completed=completed, incomplete=incomplete, unrecognized=unrecognized)


class AccountProcessor:
    """Orchestrates the remote calls for a single account.

    Dependencies are injected via the constructor so the processor is
    testable without network calls or real delays.
    """

    def __init__(
        self,
        *,
        client: DealrClient,
        throttle: MissionThrottle,
        reporter: StatusReporter,
    ) -> None:
        self._client = client
        self._throttle = throttle
        self._reporter = reporter

    async def process(
        self,
        token: str,
        proxy: ProxyEndpoint | None,
        index: int = 0,
    ) -> SessionResult | None:
        """Process one account. Returns None if it could not be identified."""
        try:
            return await self._process_inner(token, proxy, index)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Catch-all so one account never aborts the batch
            logger.exception(
                "Unexpected error while processing account %d: %s",
                index + 1,
                exc,
                extra={"account_index": index},
            )
            self._reporter.error(f"Unexpected error on account {index + 1}: {exc}")
            return None

    # ------------------------------------------------------------------
    # Internal workflow
    # ------------------------------------------------------------------

    async def _process_inner(
        self,
        token: str,
        proxy: ProxyEndpoint | None,
        index: int,
    ) -> SessionResult | None:
        profile = await self._client.fetch_profile(token, proxy)
        if profile is None:
            logger.warning("Account %d: invalid token or user not found", index + 1, extra={"account_index": index})
            self._reporter.error("Invalid token or user not found")
            return None

        ip = await self._client.fetch_public_ip(proxy)
        self._reporter.identity(profile, ip)

        result = SessionResult(
            account_index=index,
            user_id=profile.id,
            user_name=profile.name,
            ip=ip,
        )

        missions = await self._client.fetch_missions(token, proxy)
        if not missions:
            self._reporter.warning("No missions available.")
            return result

        partition = partition_missions(missions)
        if partition.unrecognized:
            logger.debug(
                "Account %d: ignoring %d missions with unknown status: %s",
                index + 1,
                len(partition.unrecognized),
                sorted({m.status for m in partition.unrecognized}),
            )
        result.already_completed = len(partition.completed)
        self._reporter.missions(partition)

        for mission in partition.incomplete:
            if await self._client.complete_mission(mission, token, proxy):
                result.completed_now += 1
            else:
                result.failed += 1
            await self._throttle.wait(self._reporter)

        if partition.incomplete:
            self._reporter.success("Finished processing all missions.")
        else:
            self._reporter.success("All missions already done.")

        result.point_balance = await self._client.fetch_point_balance(token, proxy)
        self._reporter.finished(profile.name)

        logger.info(
            "Account %d processed: %d already completed, %d completed now, %d failed",
            index + 1,
            result.already_completed,
            result.completed_now,
            result.failed,
            extra={"account_index": index},
        )
        return result
