"""Command line entry point.

Startup: build settings (env, optional YAML, flags), configure logging,
decide whether to use proxies, load proxies and tokens, then hand over to
the scheduler until it is stopped.

Exit status: 0 after a normal stop, 1 on an unexpected failure, 2 on a
configuration error (no tokens, invalid settings).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from pydantic import ValidationError

from dealr_bot import __version__
from dealr_bot.config.file_config import build_settings
from dealr_bot.config.loader import load_proxies, load_tokens
from dealr_bot.config.settings import BotSettings
from dealr_bot.errors import ConfigurationError
from dealr_bot.integration.dealr_client import DealrClient
from dealr_bot.logging_config import configure_logging
from dealr_bot.proxy.manager import ProxyPool
from dealr_bot.reporting.console import StatusReporter
from dealr_bot.resilience.throttle import MissionThrottle
from dealr_bot.services.account_processor import AccountProcessor
from dealr_bot.services.scheduler import Scheduler

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dealr-bot",
        description="Complete pending Dealr missions for every account, once a day.",
    )
    parser.add_argument("--tokens", dest="token_file", help="token file, one bearer token per line")
    parser.add_argument("--proxies", dest="proxy_file", help="proxy file, one proxy URI per line")
    proxy_group = parser.add_mutually_exclusive_group()
    proxy_group.add_argument("--proxy", dest="use_proxy", action="store_const", const=True, help="use proxies without asking")
    proxy_group.add_argument("--no-proxy", dest="use_proxy", action="store_const", const=False, help="connect directly without asking")
    parser.add_argument("--once", action="store_true", help="run a single cycle and exit")
    parser.add_argument("--config", dest="config_file", help="YAML file with settings overrides")
    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--json-logs", dest="log_json", action="store_const", const=True, help="emit JSON log lines")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_use_proxy(settings: BotSettings, reporter: StatusReporter) -> bool:
    """Proxy use from settings, asking the operator when unset."""
    if settings.use_proxy is not None:
        return settings.use_proxy
    return reporter.ask_yes_no("Use proxy?")


def _install_signal_handlers(scheduler: Scheduler) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
        except (NotImplementedError, RuntimeError):
            # Windows event loops do not support signal handlers
            pass


async def run(
    settings: BotSettings,
    reporter: StatusReporter,
    use_proxy: bool = False,
    once: bool = False,
) -> None:
    """Load inputs, wire components and run the scheduler.

    Raises ``ConfigurationError`` when there are no accounts to process.
    """
    proxies: list[str] = []
    if use_proxy:
        proxies = load_proxies(settings.proxy_file)
        if not proxies:
            reporter.warning("No proxy available, continuing without proxy.")

    tokens = load_tokens(settings.token_file)

    client = DealrClient(settings, reporter=reporter)
    throttle = MissionThrottle(settings.mission_delay_min_ms, settings.mission_delay_max_ms)
    processor = AccountProcessor(client=client, throttle=throttle, reporter=reporter)
    scheduler = Scheduler(
        processor=processor,
        tokens=tokens,
        proxy_pool=ProxyPool(proxies),
        interval_seconds=settings.cycle_interval_seconds,
        reporter=reporter,
    )

    _install_signal_handlers(scheduler)
    await scheduler.run(max_cycles=1 if once else None)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    reporter = StatusReporter()

    try:
        settings = build_settings(
            config_file=args.config_file,
            token_file=args.token_file,
            proxy_file=args.proxy_file,
            use_proxy=args.use_proxy,
            log_level=args.log_level,
            log_json=args.log_json,
        )
    except ValidationError as exc:
        reporter.error(f"Invalid settings: {exc}")
        return EXIT_CONFIG

    configure_logging(settings.log_level, json_output=settings.log_json)
    reporter.title("=== Dealr auto complete missions ===")

    # Asked before the event loop starts, the prompt blocks on stdin
    try:
        use_proxy = resolve_use_proxy(settings, reporter)
    except KeyboardInterrupt:
        reporter.warning("Interrupted.")
        return EXIT_OK

    try:
        asyncio.run(run(settings, reporter, use_proxy=use_proxy, once=args.once))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc.message)
        reporter.error(exc.message)
        return EXIT_CONFIG
    except KeyboardInterrupt:
        reporter.warning("Interrupted.")
        return EXIT_OK
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        reporter.error(f"Error: {exc}")
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
