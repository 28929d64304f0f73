"""Proxy-aware httpx client factory.

Every outbound call gets a fresh ``httpx.AsyncClient`` carrying the browser
style headers the API expects and, when a proxy is given, a transport that
tunnels through it. HTTP(S) proxies use httpx's native proxy support; SOCKS4
and SOCKS5 proxies go through ``httpx_socks``.
"""

from __future__ import annotations

import logging
from typing import Callable

import httpx
from httpx_socks import AsyncProxyTransport, ProxyConnectionError, ProxyError, ProxyTimeoutError

from dealr_bot.config.settings import BotSettings
from dealr_bot.logging_config import mask_proxy
from dealr_bot.proxy.types import ProxyEndpoint

logger = logging.getLogger(__name__)

# Errors a request can end with, proxy handshake failures included
TRANSPORT_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    ProxyError,
    ProxyConnectionError,
    ProxyTimeoutError,
)

# Errors building a client from a malformed proxy line or an unencodable token
CLIENT_SETUP_ERRORS = (httpx.InvalidURL, ValueError)

ClientFactory = Callable[[str | None, ProxyEndpoint | None, BotSettings], httpx.AsyncClient]


def build_headers(token: str | None, settings: BotSettings) -> dict[str, str]:
    """Headers of a browser session on the Dealr web app."""
    origin = settings.web_origin.rstrip("/")
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, text/plain, */*",
        "Accept-Encoding": "gzip, deflate, br",
        "Content-Type": "application/json",
        "Origin": origin,
        "Referer": f"{origin}/",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def build_transport(proxy: ProxyEndpoint | None) -> AsyncProxyTransport | None:
    """SOCKS transport for a proxy, or None when httpx handles it natively."""
    if proxy is None or not proxy.is_socks:
        return None
    return AsyncProxyTransport.from_url(proxy.url)


def create_client(
    token: str | None,
    proxy: ProxyEndpoint | None,
    settings: BotSettings,
) -> httpx.AsyncClient:
    """Create a client for one request/response exchange.

    Unsupported proxy schemes fall back to a direct connection.
    """
    kwargs: dict = {
        "headers": build_headers(token, settings),
        "timeout": httpx.Timeout(settings.request_timeout_seconds),
        "follow_redirects": True,
    }

    if proxy is not None and proxy.is_supported:
        if proxy.is_socks:
            kwargs["transport"] = build_transport(proxy)
        else:
            kwargs["proxy"] = proxy.url
    elif proxy is not None:
        logger.debug("Ignoring unsupported proxy %s", mask_proxy(proxy.url))

    return httpx.AsyncClient(**kwargs)
