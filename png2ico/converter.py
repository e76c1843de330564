#!/usr/bin/env python3
"""
png2ico - Conversion Pipeline

Coordinates the full conversion:
    load source -> build frames (distinct sizes, ascending)
    -> write container -> atomic save

Every validation happens before the destination is touched, so a failed
conversion never leaves a partial icon behind.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image

from png2ico import config, storage
from png2ico.container import write_container
from png2ico.frames import build_frames, unique_sizes
from png2ico.log import log_info


@dataclass(frozen=True)
class ConversionResult:
    """Summary of a completed file conversion."""

    output: Path
    edges: List[int]
    byte_count: int


def convert_image(
    source: Image.Image,
    sizes: Iterable[int],
    workers: int = 1,
    cancel: Optional[threading.Event] = None,
) -> bytes:
    """
    Convert a decoded image into icon container bytes.

    Args:
        source: Decoded source image.
        sizes: Requested edge lengths (1..256; duplicates collapse).
        workers: Threads used for per-size frame builds.
        cancel: Optional event checked between per-size builds.

    Returns:
        The complete icon container.
    """
    frames = build_frames(source, sizes, workers=workers, cancel=cancel)
    return write_container(frames)


def convert_file(
    input_path: storage.PathLike,
    output_path: storage.PathLike,
    sizes: Optional[Iterable[int]] = None,
    workers: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
) -> ConversionResult:
    """
    Convert an image file into an .ico file.

    Args:
        input_path: Source image path.
        output_path: Destination .ico path; replaced if it exists.
        sizes: Requested edges, or None for config.DEFAULT_SIZES.
        workers: Thread count, or None for config.WORKERS.
        cancel: Optional event checked between per-size builds.

    Returns:
        A ConversionResult describing the written file.

    Raises:
        Png2IcoError: Any pipeline failure; the destination is unchanged.
    """
    edges = unique_sizes(config.DEFAULT_SIZES if sizes is None else sizes)
    workers = config.resolve_workers(workers)

    log_info(f"Converting {input_path} -> {output_path} (sizes: {edges}, workers: {workers})")

    source = storage.load_source(input_path)
    frames = build_frames(source, edges, workers=workers, cancel=cancel)
    data = write_container(frames)
    written = storage.write_atomic(output_path, data)

    log_info(f"Wrote {written} ({len(data)} bytes, frames: {edges})")
    return ConversionResult(output=written, edges=edges, byte_count=len(data))
