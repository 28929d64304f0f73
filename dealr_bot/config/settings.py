"""Pydantic Settings for the mission automation client.

All environment variables use the DEALR_ prefix.
Example: DEALR_TOKEN_FILE=accounts.txt, DEALR_CYCLE_INTERVAL_SECONDS=3600
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/134.0.0.0 Safari/537.36"
)


class BotSettings(BaseSettings):
    """Client configuration validated from environment variables."""

    # Remote service
    api_base_url: str = "https://api.dealr.fun/v1"
    web_origin: str = "https://dealr.fun"  # Origin / Referer the API expects
    user_agent: str = DEFAULT_USER_AGENT
    ip_lookup_url: str = "https://api.ipify.org?format=json"
    success_code: int = 2000  # Application code of an accepted finish request
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    # Input files
    token_file: str = "token.txt"
    proxy_file: str = "proxy.txt"
    use_proxy: bool | None = None  # None asks at startup

    # Pacing
    mission_delay_min_ms: int = Field(default=2000, ge=0)
    mission_delay_max_ms: int = Field(default=5000, ge=0)
    cycle_interval_seconds: int = Field(default=86400, ge=0)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Optional YAML file with overrides for any field above
    config_file: str | None = None

    model_config = {"env_prefix": "DEALR_"}

    @model_validator(mode="after")
    def _check_delay_window(self) -> "BotSettings":
        if self.mission_delay_min_ms > self.mission_delay_max_ms:
            raise ValueError(
                "mission_delay_min_ms must not exceed mission_delay_max_ms"
            )
        return self
