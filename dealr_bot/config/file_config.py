"""YAML settings overrides.

An optional YAML file may hold any ``BotSettings`` field as a top-level key.
The loader never fails the run: a missing or unreadable file just means no
overrides.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from dealr_bot.config.settings import BotSettings

logger = logging.getLogger(__name__)


def load_file_overrides(yaml_path: str) -> dict[str, Any]:
    """Parse a YAML settings file into a dict of known settings fields.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        A dict of field name to raw value. Empty if the file is missing,
        malformed, or not a mapping. Unknown keys are dropped.
    """
    path = Path(yaml_path)

    if not path.exists():
        logger.warning("Config file not found at %s, using defaults", yaml_path)
        return {}

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Failed to parse config file at %s: %s", yaml_path, exc)
        return {}

    if raw is None:
        return {}

    if not isinstance(raw, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", yaml_path)
        return {}

    known = set(BotSettings.model_fields)
    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            logger.warning("Unknown config key '%s' in %s, skipping", key, yaml_path)
            continue
        overrides[key] = value

    return overrides


def build_settings(
    config_file: str | None = None,
    **cli_overrides: Any,
) -> BotSettings:
    """Build settings from environment, optional YAML file and CLI flags.

    Precedence, lowest first: defaults, ``DEALR_*`` environment, YAML file,
    CLI flags. CLI values of ``None`` mean "not given".

    Raises ``pydantic.ValidationError`` on invalid values.
    """
    env_settings = BotSettings()
    path = config_file or env_settings.config_file

    merged: dict[str, Any] = {}
    if path:
        merged.update(load_file_overrides(path))
        merged["config_file"] = path
    merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    if not merged:
        return env_settings
    return BotSettings(**merged)
