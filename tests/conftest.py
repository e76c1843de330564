import os
import tempfile

# Must be set before png2ico.config is imported
os.environ["PNG2ICO_LOG_DIR"] = tempfile.mkdtemp(prefix="png2ico-test-logs-")
for _name in ("PNG2ICO_SIZES", "PNG2ICO_WORKERS", "PNG2ICO_LOG_LEVEL"):
    os.environ.pop(_name, None)

import struct  # noqa: E402

import pytest  # noqa: E402
from PIL import Image  # noqa: E402

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def red_square():
    """64x64 fully opaque red image."""
    return Image.new("RGBA", (64, 64), RED)


@pytest.fixture
def wide_image():
    """100x50 opaque blue image (2:1 aspect ratio)."""
    return Image.new("RGBA", (100, 50), BLUE)


@pytest.fixture
def red_png(tmp_path, red_square):
    path = tmp_path / "red.png"
    red_square.save(path, format="PNG")
    return path


def unpack_header(data):
    return struct.unpack_from("<HHH", data, 0)


def unpack_entry(data, index):
    return struct.unpack_from("<BBBBHHII", data, 6 + 16 * index)
