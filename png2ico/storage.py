#!/usr/bin/env python3
"""
png2ico - Storage Module

Handles reading the source image and persisting the finished icon.

File handling:
    The destination is written to a temporary file in the same directory,
    flushed, fsynced and then renamed over the target. A failed write
    leaves any existing file untouched and no partial file behind.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from png2ico.errors import DestinationUnwritable, SourceUnavailable
from png2ico.log import log_debug

PathLike = Union[str, os.PathLike]


# =============================================================================
# SOURCE
# =============================================================================

def load_source(path: PathLike) -> Image.Image:
    """
    Load and decode the source image as RGBA.

    Any format Pillow can read is accepted; PNG is the usual input.

    Args:
        path: Path to the source image.

    Returns:
        A fully loaded RGBA image (no file handle kept open).

    Raises:
        SourceUnavailable: If the file is missing, unreadable or not an image.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceUnavailable(f"Input image not found: {path}")

    try:
        with Image.open(path) as img:
            img.load()
            source = img.convert("RGBA")
    except UnidentifiedImageError:
        raise SourceUnavailable(f"Not a recognised image: {path}") from None
    except (OSError, ValueError) as e:
        raise SourceUnavailable(f"Could not read {path}: {e}") from e

    if source.width <= 0 or source.height <= 0:
        raise SourceUnavailable(f"Image has no pixels: {path}")

    log_debug(f"Loaded {path} ({source.width}x{source.height}, converted to RGBA)")
    return source


# =============================================================================
# DESTINATION
# =============================================================================

def _target_mode(path: Path) -> int:
    """Mode for the finished file: the existing target's, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_atomic(path: PathLike, data: bytes) -> Path:
    """
    Replace the contents of path with data in one step.

    Missing parent directories are created. The file keeps the mode of the
    file it replaces, or gets the umask default when it is new.

    Args:
        path: Destination file.
        data: Complete file contents.

    Returns:
        The destination path.

    Raises:
        DestinationUnwritable: If the directory or file cannot be written.
    """
    path = Path(path)
    parent = path.resolve().parent

    try:
        parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=parent)
    except OSError as e:
        raise DestinationUnwritable(f"Cannot write to {parent}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise DestinationUnwritable(f"Cannot write {path}: {e}") from e

    log_debug(f"Wrote {len(data)} bytes to {path}")
    return path
