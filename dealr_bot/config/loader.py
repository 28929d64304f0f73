"""Line-delimited input files: tokens and proxies.

Entries are trimmed and blank lines skipped. Nothing is validated here;
a malformed token or proxy only shows up later as a failed request.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dealr_bot.errors import ConfigFileError, NoAccountsError

logger = logging.getLogger(__name__)


def read_lines(path: str | Path) -> list[str]:
    """Return the non-empty, stripped lines of a UTF-8 text file.

    Raises ``ConfigFileError`` if the file cannot be read.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigFileError(f"Cannot read {path}: {exc}", path=str(path)) from exc

    return [line.strip() for line in text.splitlines() if line.strip()]


def load_tokens(path: str | Path) -> list[str]:
    """Load account tokens. An unreadable or empty file is fatal."""
    try:
        tokens = read_lines(path)
    except ConfigFileError as exc:
        logger.error("Failed to read token file: %s", exc.message)
        raise NoAccountsError(f"No tokens loaded: {exc.message}", path=str(path)) from exc

    if not tokens:
        raise NoAccountsError(f"Token file {path} has no entries", path=str(path))

    logger.info("Loaded %d tokens from %s", len(tokens), path)
    return tokens


def load_proxies(path: str | Path) -> list[str]:
    """Load proxy URIs. An unreadable or empty file degrades to no proxies."""
    try:
        proxies = read_lines(path)
    except ConfigFileError as exc:
        logger.warning("Proxy file unavailable (%s), continuing without proxy", exc.message)
        return []

    if not proxies:
        logger.warning("Proxy file %s is empty, continuing without proxy", path)
        return []

    logger.info("Loaded %d proxies from %s", len(proxies), path)
    return proxies
