"""Proxy package: endpoint parsing and round-robin account pairing."""

from dealr_bot.proxy.manager import ProxyPool
from dealr_bot.proxy.types import ProxyEndpoint

__all__ = ["ProxyEndpoint", "ProxyPool"]
