"""HTTP client construction."""

from dealr_bot.network.client_factory import ClientFactory, build_headers, create_client

__all__ = ["ClientFactory", "build_headers", "create_client"]
