"""Operator-facing status output.

Everything the operator sees goes through a ``StatusReporter``. Long running
calls are wrapped in ``reporter.step(...)``, which shows a spinner while the
block runs and is released when it exits, so no spinner state outlives the
call that created it.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.status import Status
from rich.theme import Theme

from dealr_bot.models.schemas import Mission, MissionPartition, MissionStatus, Profile

THEME = Theme(
    {
        "ok": "bold bright_green",
        "err": "bold bright_red",
        "warn": "yellow",
        "info": "bold bright_white",
        "muted": "grey62",
        "accent": "bold bright_cyan",
        "todo": "bold bright_yellow",
    }
)

RULE_WIDTH = 80


def shorten(value: str | None, front: int = 6, back: int = 4) -> str | None:
    """Shorten an identifier to ``front....back`` for display."""
    if not value or len(value) <= front + back:
        return value
    return f"{value[:front]}....{value[-back:]}"


class StepHandle:
    """Outcome handle for a single ``StatusReporter.step`` block."""

    def __init__(self, console: Console, status: Status | None) -> None:
        self._console = console
        self._status = status
        self.outcome: bool | None = None

    def update(self, text: str) -> None:
        if self._status is not None:
            self._status.update(escape(text))

    def done(self) -> None:
        """Close the step successfully without printing anything."""
        self.outcome = True

    def succeed(self, message: str) -> None:
        self.outcome = True
        self._console.print(f"[ok]✔ {escape(message)}[/ok]")

    def fail(self, message: str) -> None:
        self.outcome = False
        self._console.print(f"[err]✖ {escape(message)}[/err]")


class StatusReporter:
    """Prints human readable status lines to the terminal.

    Parameters
    ----------
    console:
        Rich console to print on. Defaults to a themed stdout console.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(theme=THEME)
        if console is not None:
            self.console.push_theme(THEME)

    # ------------------------------------------------------------------
    # Scoped steps
    # ------------------------------------------------------------------

    @contextmanager
    def step(self, text: str) -> Iterator[StepHandle]:
        """Show a spinner for the duration of the block.

        A block that exits without calling ``succeed`` or ``fail`` is
        reported as failed.
        """
        status = None
        if self.console.is_terminal:
            status = self.console.status(escape(text), spinner="dots")
            status.start()
        handle = StepHandle(self.console, status)
        try:
            yield handle
        finally:
            if status is not None:
                status.stop()
            if handle.outcome is None:
                handle.fail(f"{text} interrupted")

    # ------------------------------------------------------------------
    # Plain lines
    # ------------------------------------------------------------------

    def title(self, text: str) -> None:
        self.console.print(f"[accent]{escape(text)}[/accent]", justify="center")

    def info(self, message: str) -> None:
        self.console.print(f"[info]{escape(message)}[/info]")

    def success(self, message: str) -> None:
        self.console.print(f"[ok]{escape(message)}[/ok]")

    def warning(self, message: str) -> None:
        self.console.print(f"[warn]{escape(message)}[/warn]")

    def error(self, message: str) -> None:
        self.console.print(f"[err]{escape(message)}[/err]")

    def ask_yes_no(self, question: str) -> bool:
        """Ask a y/n question. Anything but ``y`` means no."""
        try:
            answer = self.console.input(f"{escape(question)} (y/n): ")
        except EOFError:
            return False
        return answer.strip().lower() == "y"

    def rule(self) -> None:
        self.console.print(Rule(style="accent"), width=RULE_WIDTH)

    # ------------------------------------------------------------------
    # Account workflow
    # ------------------------------------------------------------------

    def account_header(self, index: int, total: int) -> None:
        self.console.print()
        self.rule()
        self.info(f"Account: {index + 1}/{total}")

    def identity(self, profile: Profile, ip: str) -> None:
        self.console.print()
        self.info(f"User ID   : {shorten(profile.id)}")
        self.info(f"UserName  : {profile.name}")
        self.info(f"IP Used   : {ip}")
        self.rule()
        self.console.print()

    def missions(self, partition: MissionPartition) -> None:
        self.console.print("[ok]Missions already completed:[/ok]")
        if not partition.completed:
            self.console.print("[muted]  No missions completed yet.[/muted]")
        for mission in partition.completed:
            self.console.print(f"[ok]  ☑  {escape(mission.name)} done[/ok]")

        self.console.print()
        self.console.print("[todo]Uncompleted missions:[/todo]")
        if not partition.incomplete:
            self.console.print("[muted]  No uncompleted missions.[/muted]")
        for mission in partition.incomplete:
            self.console.print(f"[todo]  ✗  {escape(mission.name)} {_status_label(mission)}[/todo]")
        self.rule()
        self.console.print()

    async def countdown(
        self,
        delay_ms: int,
        sleep: Callable[[float], Awaitable[object]],
    ) -> None:
        """Sleep ``delay_ms`` while showing the remaining whole seconds."""
        seconds = delay_ms / 1000
        whole = math.floor(seconds)
        remainder = seconds - whole

        with self.step(f"Waiting {whole} seconds before next mission...") as handle:
            for remaining in range(whole, 0, -1):
                handle.update(f"Waiting {remaining} seconds before next mission...")
                await sleep(1)
            if remainder > 0:
                await sleep(remainder)
            handle.done()

    def finished(self, name: str | None) -> None:
        self.console.print()
        self.console.print(f"[todo]Finished processing account: {escape(str(name))}[/todo]")

    def waiting_next_cycle(self, seconds: int) -> None:
        hours = seconds / 3600
        self.console.print()
        self.console.print(f"[muted]Waiting {hours:g} hours before next cycle...[/muted]")


def _status_label(mission: Mission) -> str:
    if mission.status == MissionStatus.IN_PROGRESS.value:
        return "in progress"
    return "not started"
