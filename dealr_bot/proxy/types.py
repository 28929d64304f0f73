"""Proxy data models."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

SUPPORTED_PROTOCOLS = ("http", "https", "socks4", "socks5")
SOCKS_PROTOCOLS = ("socks4", "socks5")


@dataclass(frozen=True)
class ProxyEndpoint:
    """A single proxy endpoint as read from the proxy file."""

    url: str
    protocol: str  # http, https, socks4, socks5 or whatever scheme was given

    @classmethod
    def parse(cls, raw_url: str) -> "ProxyEndpoint":
        """Build an endpoint from a proxy string.

        A bare ``host:port`` (no scheme) is taken as an HTTP proxy.
        """
        raw_url = raw_url.strip()
        if "://" not in raw_url:
            raw_url = f"http://{raw_url}"
        parsed = urlparse(raw_url)
        return cls(url=raw_url, protocol=parsed.scheme.lower())

    @property
    def is_supported(self) -> bool:
        return self.protocol in SUPPORTED_PROTOCOLS

    @property
    def is_socks(self) -> bool:
        return self.protocol in SOCKS_PROTOCOLS
