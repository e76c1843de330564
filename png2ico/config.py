#!/usr/bin/env python3
"""
png2ico - Configuration Module

Manages conversion defaults including:
- Icon edge limits imposed by the container format
- Default size list for new icons
- Worker count for per-size frame builds
- Log file location

Values can be overridden through environment variables or a .env file
found from the current working directory upward.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from png2ico.errors import ConfigError

load_dotenv(find_dotenv(usecwd=True))

_logger = logging.getLogger("png2ico")

# =============================================================================
# FORMAT LIMITS
# =============================================================================

# Single-byte width/height fields; 256 is stored as 0
MIN_EDGE: int = 1
MAX_EDGE: int = 256

# Directory count is a u16
MAX_FRAMES: int = 0xFFFF

# zlib level for embedded PNG payloads
PNG_COMPRESS_LEVEL: int = 9


# =============================================================================
# SIZE LIST PARSING
# =============================================================================

def parse_size_list(raw: str) -> List[int]:
    """
    Parse a comma-separated size list such as "16, 32,48".

    Whitespace around entries is ignored and empty entries are skipped.
    Range checking is left to the frame builder so that an out-of-range
    value aborts the run with InvalidSize.

    Args:
        raw: The comma-separated list.

    Returns:
        Sizes in the order given, duplicates included.

    Raises:
        ConfigError: If an entry is not an integer or the list is empty.
    """
    sizes = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            sizes.append(int(part))
        except ValueError:
            raise ConfigError(f"Invalid size value: {part!r}") from None

    if not sizes:
        raise ConfigError("Sizes list is empty.")
    return sizes


def _env_sizes(name: str, default: List[int]) -> List[int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return parse_size_list(raw)
    except ConfigError as e:
        _logger.warning("Ignoring %s: %s", name, e)
        return default


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        _logger.warning("Ignoring %s: not an integer (%r)", name, raw)
        return default
    if value < minimum:
        _logger.warning("Ignoring %s: must be >= %d", name, minimum)
        return default
    return value


# =============================================================================
# DEFAULTS (environment overridable)
# =============================================================================

DEFAULT_SIZES: List[int] = _env_sizes("PNG2ICO_SIZES", [16, 24, 32, 48, 64, 128, 256])

# 1 = build frames sequentially
WORKERS: int = _env_int("PNG2ICO_WORKERS", 1)

LOG_DIR: Path = Path(os.getenv("PNG2ICO_LOG_DIR", str(Path.home() / ".png2ico" / "logs")))
LOG_LEVEL: str = os.getenv("PNG2ICO_LOG_LEVEL", "INFO").upper()


def resolve_workers(workers: Optional[int]) -> int:
    """Return an explicit worker count, or the configured default."""
    if workers is None:
        return WORKERS
    if workers < 1:
        raise ConfigError(f"Worker count must be >= 1 (got {workers}).")
    return workers
