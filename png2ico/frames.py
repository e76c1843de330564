#!/usr/bin/env python3
"""
png2ico - Frame Builder

Turns a source image into one square, PNG-encoded frame per requested
edge length.

For each edge the source is:
- scaled to fit inside an edge x edge square, keeping its aspect ratio
  (Lanczos resampling)
- pasted centered onto a fully transparent canvas
- encoded with the PNG codec

Each build reads the source and allocates its own canvas, so sizes can be
built on worker threads. Results always come back in ascending edge order.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from PIL import Image

from png2ico import config
from png2ico.codec import encode_png
from png2ico.errors import Cancelled, InvalidSize
from png2ico.log import log_debug

Codec = Callable[[Image.Image], bytes]


@dataclass(frozen=True)
class FrameArtifact:
    """One resolution variant: its edge length and encoded payload."""

    edge: int
    payload: bytes


# =============================================================================
# SIZE VALIDATION
# =============================================================================

def validate_edge(edge: object) -> int:
    """Return edge unchanged if it is an int in 1..256, else raise InvalidSize."""
    if isinstance(edge, bool) or not isinstance(edge, int):
        raise InvalidSize(edge)
    if edge < config.MIN_EDGE or edge > config.MAX_EDGE:
        raise InvalidSize(edge)
    return edge


def unique_sizes(sizes: Iterable[int]) -> List[int]:
    """
    Collapse a requested size list into the distinct sizes, ascending.

    Every entry is validated first: a single bad size aborts the whole run
    rather than being skipped.

    Raises:
        InvalidSize: If any entry is outside 1..256.
    """
    sizes = [validate_edge(s) for s in sizes]
    return sorted(set(sizes))


# =============================================================================
# GEOMETRY
# =============================================================================

def fit_size(width: int, height: int, edge: int) -> Tuple[int, int]:
    """
    Compute the largest size with the source's aspect ratio that fits
    inside an edge x edge square.

    Each side is rounded to the nearest pixel and kept within 1..edge, so
    a very thin source still produces a visible one-pixel line.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Source dimensions must be positive (got {width}x{height})")

    scale = min(edge / width, edge / height)
    scaled_w = min(edge, max(1, round(width * scale)))
    scaled_h = min(edge, max(1, round(height * scale)))
    return scaled_w, scaled_h


def center_offset(edge: int, scaled_w: int, scaled_h: int) -> Tuple[int, int]:
    """Top-left position that centers a scaled_w x scaled_h image (floored)."""
    return (edge - scaled_w) // 2, (edge - scaled_h) // 2


# =============================================================================
# FRAME CONSTRUCTION
# =============================================================================

def render_canvas(source: Image.Image, edge: int) -> Image.Image:
    """
    Build the edge x edge RGBA canvas for one frame.

    The canvas starts fully transparent. The scaled source is pasted without
    a mask, so its pixels (alpha included) replace the canvas pixels.

    Raises:
        InvalidSize: If edge is outside 1..256.
    """
    validate_edge(edge)
    if source.mode != "RGBA":
        source = source.convert("RGBA")

    scaled_size = fit_size(source.width, source.height, edge)
    scaled = source.resize(scaled_size, Image.Resampling.LANCZOS)

    canvas = Image.new("RGBA", (edge, edge), (0, 0, 0, 0))
    canvas.paste(scaled, center_offset(edge, *scaled_size))
    return canvas


def build_frame(source: Image.Image, edge: int, codec: Codec = encode_png) -> FrameArtifact:
    """
    Render and encode a single frame.

    Args:
        source: Decoded source image.
        edge: Square side length, 1..256.
        codec: Canvas-to-bytes encoder (PNG by default).

    Returns:
        The frame artifact for this edge.

    Raises:
        InvalidSize: If edge is outside 1..256 (checked before any work).
        EncodeFailure: If the codec fails.
    """
    validate_edge(edge)
    canvas = render_canvas(source, edge)
    payload = bytes(codec(canvas))
    log_debug(f"Built {edge}x{edge} frame ({len(payload)} bytes)")
    return FrameArtifact(edge=edge, payload=payload)


def build_frames(
    source: Image.Image,
    sizes: Iterable[int],
    workers: int = 1,
    cancel: Optional[threading.Event] = None,
    codec: Codec = encode_png,
) -> List[FrameArtifact]:
    """
    Build one frame per distinct requested size.

    Args:
        source: Decoded source image (read-only here).
        sizes: Requested edges; duplicates collapse, order is ignored.
        workers: Number of threads used for per-size builds.
        cancel: Checked before each per-size build.
        codec: Canvas-to-bytes encoder.

    Returns:
        Frames sorted by ascending edge.

    Raises:
        InvalidSize: If any requested size is outside 1..256.
        EncodeFailure: If any frame fails to encode.
        Cancelled: If cancel was set before all frames were built.
    """
    edges = unique_sizes(sizes)
    if source.mode != "RGBA":
        source = source.convert("RGBA")

    def _build(edge: int) -> FrameArtifact:
        if cancel is not None and cancel.is_set():
            raise Cancelled(f"Cancelled before building {edge}x{edge} frame.")
        return build_frame(source, edge, codec)

    if workers <= 1 or len(edges) <= 1:
        return [_build(edge) for edge in edges]

    with ThreadPoolExecutor(max_workers=min(workers, len(edges))) as pool:
        # map() yields in submission order, which is ascending edge order
        return list(pool.map(_build, edges))
