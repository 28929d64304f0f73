"""Configuration: settings, YAML overrides and input files."""

from dealr_bot.config.file_config import build_settings, load_file_overrides
from dealr_bot.config.loader import load_proxies, load_tokens, read_lines
from dealr_bot.config.settings import BotSettings

__all__ = [
    "BotSettings",
    "build_settings",
    "load_file_overrides",
    "load_proxies",
    "load_tokens",
    "read_lines",
]
