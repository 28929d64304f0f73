"""Unit tests for the scheduler loop."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from dealr_bot.proxy.manager import ProxyPool
from dealr_bot.reporting.console import StatusReporter
from dealr_bot.resilience.throttle import MissionThrottle
from dealr_bot.services.account_processor import AccountProcessor
from dealr_bot.services.scheduler import Scheduler, SchedulerState
from tests.fakes import FakeDealrApi, RecordingSleep, reporter_output


def _scheduler(processor, tokens, proxies=None, interval=86400, reporter=None) -> Scheduler:
    return Scheduler(
        processor=processor,
        tokens=tokens,
        proxy_pool=ProxyPool(proxies or []),
        interval_seconds=interval,
        reporter=reporter,
    )


class TestScheduler:
    @pytest.mark.asyncio
    async def test_single_cycle_processes_accounts_in_order(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A", "B", "C"], reporter=reporter)

        await scheduler.run(max_cycles=1)

        tokens = [c.args[0] for c in processor.process.await_args_list]
        indexes = [c.args[2] for c in processor.process.await_args_list]
        assert tokens == ["A", "B", "C"]
        assert indexes == [0, 1, 2]
        assert scheduler.cycles_completed == 1
        assert scheduler.state == SchedulerState.STOPPED
        assert "Account: 3/3" in reporter_output(reporter)

    @pytest.mark.asyncio
    async def test_proxy_paired_round_robin(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(
            processor,
            ["A", "B", "C", "D", "E"],
            proxies=["http://p0:1", "socks5://p1:2"],
            reporter=reporter,
        )

        await scheduler.run(max_cycles=1)

        proxies = [c.args[1].url for c in processor.process.await_args_list]
        assert proxies == ["http://p0:1", "socks5://p1:2", "http://p0:1", "socks5://p1:2", "http://p0:1"]

    @pytest.mark.asyncio
    async def test_no_proxies_means_direct(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A", "B"], reporter=reporter)

        await scheduler.run(max_cycles=1)

        assert [c.args[1] for c in processor.process.await_args_list] == [None, None]

    @pytest.mark.asyncio
    async def test_sleeps_between_cycles(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A"], interval=0.01, reporter=reporter)

        await scheduler.run(max_cycles=3)

        assert processor.process.await_count == 3
        assert scheduler.cycles_completed == 3
        assert reporter_output(reporter).count("Waiting") == 2

    @pytest.mark.asyncio
    async def test_same_proxy_every_cycle(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A", "B", "C"], proxies=["http://p0:1", "http://p1:1"], interval=0, reporter=reporter)

        await scheduler.run(max_cycles=2)

        calls = processor.process.await_args_list
        first = [(c.args[0], c.args[1]) for c in calls[:3]]
        second = [(c.args[0], c.args[1]) for c in calls[3:]]
        assert first == second

    @pytest.mark.asyncio
    async def test_stop_interrupts_sleep(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A"], interval=3600, reporter=reporter)

        task = asyncio.create_task(scheduler.run())
        for _ in range(100):
            if scheduler.state == SchedulerState.SLEEPING:
                break
            await asyncio.sleep(0)
        assert scheduler.state == SchedulerState.SLEEPING

        scheduler.stop()
        await asyncio.wait_for(task, timeout=1)

        assert scheduler.state == SchedulerState.STOPPED
        assert processor.process.await_count == 1

    @pytest.mark.asyncio
    async def test_stop_before_run_processes_nothing(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A", "B"], reporter=reporter)

        scheduler.stop()
        await scheduler.run()

        processor.process.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stop_during_batch_skips_remaining_accounts(self, reporter: StatusReporter) -> None:
        processor = AsyncMock(spec=AccountProcessor)
        scheduler = _scheduler(processor, ["A", "B", "C"], reporter=reporter)

        async def process(token, proxy, index):
            if token == "A":
                scheduler.stop()

        processor.process.side_effect = process

        await scheduler.run()

        assert [c.args[0] for c in processor.process.await_args_list] == ["A"]
        assert scheduler.cycles_completed == 1


class TestSchedulerWithFakeApi:
    @pytest.mark.asyncio
    async def test_failing_profile_does_not_block_next_account(self, client_for, reporter: StatusReporter) -> None:
        api = FakeDealrApi(
            profiles={"B": {"id": "user-b", "name": "bob"}},
            missions={"B": [{"id": "5", "name": "Retweet", "status": "not_completed"}]},
        )
        processor = AccountProcessor(
            client=client_for(api),
            throttle=MissionThrottle(sleep=RecordingSleep()),
            reporter=reporter,
        )
        scheduler = _scheduler(processor, ["A", "B"], reporter=reporter)

        await scheduler.run(max_cycles=1)

        output = reporter_output(reporter)
        assert "Invalid token or user not found" in output
        assert "Finished processing account: bob" in output
        assert api.finished_ids() == ["5"]
        assert output.index("Invalid token") < output.index("Account: 2/2")
