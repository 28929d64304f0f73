"""Unit tests for the operator status reporter."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from dealr_bot.models.schemas import Mission, MissionPartition, Profile
from dealr_bot.reporting.console import StatusReporter, shorten
from tests.fakes import RecordingSleep, reporter_output


class TestShorten:
    def test_long_value(self) -> None:
        assert shorten("abcdef1234567890wxyz") == "abcdef....wxyz"

    def test_short_value_unchanged(self) -> None:
        assert shorten("abc") == "abc"
        assert shorten("abcdefghij") == "abcdefghij"

    def test_none(self) -> None:
        assert shorten(None) is None


class TestStep:
    def test_succeed(self, reporter: StatusReporter) -> None:
        with reporter.step("Working...") as step:
            step.succeed("Done")

        assert step.outcome is True
        assert "Done" in reporter_output(reporter)

    def test_fail(self, reporter: StatusReporter) -> None:
        with reporter.step("Working...") as step:
            step.fail("Nope")

        assert step.outcome is False
        assert "Nope" in reporter_output(reporter)

    def test_no_outcome_marks_failed(self, reporter: StatusReporter) -> None:
        with reporter.step("Working...") as step:
            pass

        assert step.outcome is False
        assert "Working... interrupted" in reporter_output(reporter)

    def test_exception_propagates_and_marks_failed(self, reporter: StatusReporter) -> None:
        with pytest.raises(RuntimeError):
            with reporter.step("Working...") as step:
                raise RuntimeError("x")

        assert step.outcome is False

    def test_markup_in_names_is_escaped(self, reporter: StatusReporter) -> None:
        with reporter.step("x") as step:
            step.succeed("Task [bold]odd[/bold]")

        assert "[bold]odd[/bold]" in reporter_output(reporter)


class TestAskYesNo:
    @pytest.mark.parametrize(
        ("answer", "expected"),
        [("y", True), (" Y ", True), ("n", False), ("yes", False), ("", False)],
    )
    def test_only_y_is_affirmative(self, reporter: StatusReporter, answer: str, expected: bool) -> None:
        with patch.object(reporter.console, "input", return_value=answer):
            assert reporter.ask_yes_no("Use proxy?") is expected

    def test_eof_means_no(self, reporter: StatusReporter) -> None:
        with patch.object(reporter.console, "input", side_effect=EOFError):
            assert reporter.ask_yes_no("Use proxy?") is False


class TestWorkflowLines:
    def test_identity_shortens_user_id(self, reporter: StatusReporter) -> None:
        reporter.identity(Profile(id="abcdef1234567890wxyz", name="alice"), "1.2.3.4")

        output = reporter_output(reporter)
        assert "abcdef....wxyz" in output
        assert "alice" in output
        assert "1.2.3.4" in output

    def test_missions_lists_both_groups(self, reporter: StatusReporter) -> None:
        partition = MissionPartition(
            completed=[Mission(id="1", name="Done one", status="completed")],
            incomplete=[
                Mission(id="2", name="Todo", status="not_completed"),
                Mission(id="3", name="Halfway", status="in_progress"),
            ],
            unrecognized=[],
        )

        reporter.missions(partition)

        output = reporter_output(reporter)
        assert "Done one done" in output
        assert "Todo not started" in output
        assert "Halfway in progress" in output

    def test_missions_empty_groups(self, reporter: StatusReporter) -> None:
        reporter.missions(MissionPartition(completed=[], incomplete=[], unrecognized=[]))

        output = reporter_output(reporter)
        assert "No missions completed yet." in output
        assert "No uncompleted missions." in output

    def test_waiting_next_cycle_in_hours(self, reporter: StatusReporter) -> None:
        reporter.waiting_next_cycle(86400)

        assert "Waiting 24 hours before next cycle" in reporter_output(reporter)

    @pytest.mark.asyncio
    async def test_countdown_sleeps_full_delay(self, reporter: StatusReporter) -> None:
        sleep = RecordingSleep()

        await reporter.countdown(2500, sleep)

        assert sleep.calls == [1, 1, 0.5]
