"""Dealr API client.

Four operations against ``https://api.dealr.fun/v1`` plus a public IP lookup:

- ``GET  /users/profile``          -> ``{data: {id, name}}``
- ``GET  /missions``               -> ``{data: [{id, name, status}]}``
- ``POST /missions/{id}/finish``   -> ``{code, message}``
- ``GET  /points/balance``         -> ``{data: {point}}``

Each operation is a single attempt with no retry. Failures of any kind
(transport, non-2xx, undecodable or unexpected body, rejected mission) are
logged, reported on the caller's status step and turned into ``None``,
``[]`` or ``False``. No exception leaves a public method.

SECURITY: never logs the bearer token.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from dealr_bot.config.settings import BotSettings
from dealr_bot.errors import DealrApiError, MalformedResponseError, MissionRejectedError
from dealr_bot.logging_config import mask_proxy
from dealr_bot.models.responses import CodeEnvelope, DataEnvelope
from dealr_bot.models.schemas import Mission, PointBalance, Profile
from dealr_bot.network.client_factory import (
    CLIENT_SETUP_ERRORS,
    TRANSPORT_ERRORS,
    ClientFactory,
    create_client,
)
from dealr_bot.proxy.types import ProxyEndpoint
from dealr_bot.reporting.console import StatusReporter

logger = logging.getLogger(__name__)

UNKNOWN_IP = "unknown"

M = TypeVar("M", bound=BaseModel)


def _proxy_label(proxy: ProxyEndpoint | None) -> str | None:
    return mask_proxy(proxy.url) if proxy is not None else None


def _parse_missions(entries: list[Any]) -> list[Mission]:
    missions: list[Mission] = []
    for position, entry in enumerate(entries):
        try:
            missions.append(Mission.model_validate(entry))
        except ValidationError as exc:
            logger.debug(
                "Skipping mission entry %d with unexpected shape (%d errors)",
                position,
                exc.error_count(),
            )
    return missions


class DealrClient:
    """HTTP client for the Dealr missions API.

    Parameters
    ----------
    settings:
        Client settings (base URL, origin, timeout, success code).
    reporter:
        Operator console the per-call status steps are shown on.
    client_factory:
        Builds the ``httpx.AsyncClient`` for a token/proxy pair. Tests inject
        a factory backed by ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: BotSettings,
        reporter: StatusReporter | None = None,
        client_factory: ClientFactory = create_client,
    ) -> None:
        self._settings = settings
        self._base_url = settings.api_base_url.rstrip("/")
        self._reporter = reporter or StatusReporter()
        self._client_factory = client_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_profile(self, token: str, proxy: ProxyEndpoint | None = None) -> Profile | None:
        """Return the account identity, or None if the token is not usable."""
        with self._reporter.step("Getting user info...") as step:
            try:
                envelope = await self._get(token, proxy, "/users/profile", DataEnvelope[Profile])
            except DealrApiError as exc:
                self._log_failure("fetch profile", exc, proxy)
                step.fail(f"Failed getting user info: {exc.message}")
                return None

            step.succeed("User info received")
            return envelope.data

    async def fetch_missions(self, token: str, proxy: ProxyEndpoint | None = None) -> list[Mission]:
        """Return the mission list, empty on any failure.

        Entries that do not look like a mission are skipped; the rest are
        kept in fetched order.
        """
        with self._reporter.step("Getting missions list...") as step:
            try:
                envelope = await self._get(token, proxy, "/missions", DataEnvelope[list[Any]])
            except DealrApiError as exc:
                self._log_failure("fetch missions", exc, proxy)
                step.fail(f"Failed getting missions: {exc.message}")
                return []

            missions = _parse_missions(envelope.data)
            step.succeed(f"Missions list received ({len(missions)})")
            return missions

    async def complete_mission(
        self,
        mission: Mission,
        token: str,
        proxy: ProxyEndpoint | None = None,
    ) -> bool:
        """Submit a mission as finished.

        True only if the request went through and the body carries the
        configured success code.
        """
        with self._reporter.step(f'Completing "{mission.name}"...') as step:
            try:
                await self._finish(mission.id, token, proxy)
            except MissionRejectedError as exc:
                logger.warning(
                    "Mission %s rejected with code %s: %s",
                    mission.id,
                    exc.code,
                    exc.message,
                    extra={"mission_id": mission.id, "code": exc.code},
                )
                step.fail(f'Mission "{mission.name}" failed: {exc.message}')
                return False
            except DealrApiError as exc:
                self._log_failure("complete mission", exc, proxy, mission_id=mission.id)
                step.fail(f'Failed completing "{mission.name}": {exc.message}')
                return False

            step.succeed(f'Mission "{mission.name}" completed')
            return True

    async def fetch_point_balance(
        self,
        token: str,
        proxy: ProxyEndpoint | None = None,
    ) -> float | int | None:
        """Return the account's point balance, or None on failure."""
        with self._reporter.step("Getting points balance...") as step:
            try:
                envelope = await self._get(token, proxy, "/points/balance", DataEnvelope[PointBalance])
            except DealrApiError as exc:
                self._log_failure("fetch point balance", exc, proxy)
                step.fail(f"Failed getting points: {exc.message}")
                return None

            step.succeed(f"Total points: {envelope.data.point}")
            return envelope.data.point

    async def fetch_public_ip(self, proxy: ProxyEndpoint | None = None) -> str:
        """Externally observed IP address, ``"unknown"`` if it cannot be resolved."""
        try:
            async with self._client_factory(None, proxy, self._settings) as client:
                response = await client.get(self._settings.ip_lookup_url)
            response.raise_for_status()
            ip = response.json()["ip"]
        except (*TRANSPORT_ERRORS, ValueError, KeyError, TypeError) as exc:
            logger.debug(
                "Public IP lookup failed: %s",
                exc,
                extra={"proxy_used": _proxy_label(proxy), "error_reason": str(exc)},
            )
            return UNKNOWN_IP

        return str(ip) if ip else UNKNOWN_IP

    # ------------------------------------------------------------------
    # Internal request helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        token: str,
        proxy: ProxyEndpoint | None,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Perform one exchange and return the decoded JSON body.

        Raises
        ------
        DealrApiError
            On client setup failures (malformed proxy, unencodable token),
            transport errors and non-2xx responses.
        MalformedResponseError
            If the body is not valid JSON.
        """
        url = f"{self._base_url}{path}"
        try:
            client = self._client_factory(token, proxy, self._settings)
        except CLIENT_SETUP_ERRORS as exc:
            raise DealrApiError(f"Cannot set up request: {exc}") from exc

        try:
            async with client:
                response = await client.request(method, url, json=json_body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise DealrApiError(f"HTTP {status}", status_code=status) from exc
        except TRANSPORT_ERRORS as exc:
            raise DealrApiError(str(exc) or exc.__class__.__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                "Response body is not JSON", status_code=response.status_code
            ) from exc

    async def _get(self, token: str, proxy: ProxyEndpoint | None, path: str, model: type[M]) -> M:
        body = await self._request("GET", token, proxy, path)
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Unexpected response shape from {path}", errors=exc.error_count()
            ) from exc

    async def _finish(self, mission_id: int | str, token: str, proxy: ProxyEndpoint | None) -> None:
        body = await self._request(
            "POST",
            token,
            proxy,
            f"/missions/{mission_id}/finish",
            json_body={"missionID": mission_id},
        )
        try:
            result = CodeEnvelope.model_validate(body)
        except ValidationError as exc:
            raise MalformedResponseError("Unexpected finish response shape") from exc

        # JSON true must not pass for a success code of 1
        if isinstance(result.code, bool) or result.code != self._settings.success_code:
            raise MissionRejectedError(result.reason, code=result.code)

    def _log_failure(
        self,
        operation: str,
        exc: DealrApiError,
        proxy: ProxyEndpoint | None,
        **extra: object,
    ) -> None:
        logger.warning(
            "Failed to %s: %s",
            operation,
            exc.message,
            extra={
                "status_code": exc.status_code,
                "proxy_used": _proxy_label(proxy),
                "error_reason": exc.message,
                **extra,
            },
        )
