#!/usr/bin/env python3
"""
png2ico - PNG Codec

Encodes a square RGBA canvas as a PNG blob for embedding in an icon
container. PNG frames are understood by Windows Vista and later and by
every current browser.

Output is deterministic: the same canvas always yields the same bytes,
since Pillow writes no timestamp or other optional chunks unless asked.
"""

from __future__ import annotations

from io import BytesIO

from PIL import Image

from png2ico import config
from png2ico.errors import EncodeFailure

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def encode_png(canvas: Image.Image) -> bytes:
    """
    Encode a canvas as an RGBA PNG at maximum compression.

    Args:
        canvas: The raster to encode. Non-RGBA input is converted so the
            payload always carries a full 8-bit alpha channel.

    Returns:
        The complete PNG file as bytes.

    Raises:
        EncodeFailure: If Pillow cannot encode the image.
    """
    if canvas.mode != "RGBA":
        canvas = canvas.convert("RGBA")

    buf = BytesIO()
    try:
        canvas.save(buf, format="PNG", compress_level=config.PNG_COMPRESS_LEVEL)
    except (OSError, ValueError) as e:
        raise EncodeFailure(f"PNG encoding failed for {canvas.size}: {e}") from e

    data = buf.getvalue()
    if not data:
        raise EncodeFailure(f"PNG encoder produced no data for {canvas.size}")
    return data
