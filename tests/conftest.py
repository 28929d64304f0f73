"""Shared fixtures for the client test suite."""

from __future__ import annotations

import os

import pytest

from dealr_bot.config.settings import BotSettings
from dealr_bot.integration.dealr_client import DealrClient
from dealr_bot.reporting.console import StatusReporter
from tests.fakes import FakeDealrApi, Handler, make_reporter, make_settings, mock_factory


# ---------------------------------------------------------------------------
# Keep the developer's DEALR_* environment out of the tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("DEALR_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Settings / reporter fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> BotSettings:
    """Test settings pointing at a fake API."""
    return make_settings()


@pytest.fixture
def reporter() -> StatusReporter:
    """Reporter writing to an in-memory, non-terminal console."""
    return make_reporter()


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_api() -> FakeDealrApi:
    return FakeDealrApi()


@pytest.fixture
def client_for(settings: BotSettings, reporter: StatusReporter):
    """Build a DealrClient backed by the given request handler."""

    def build(handler: Handler, calls: list | None = None) -> DealrClient:
        return DealrClient(settings, reporter=reporter, client_factory=mock_factory(handler, calls))

    return build
