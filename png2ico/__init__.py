"""
png2ico - build multi-resolution Windows .ico files from a single image.
"""

__version__ = "1.0.0"

from png2ico.container import ContainerEntry, DirectoryRecord, read_entries, write_container  # noqa: E402
from png2ico.converter import ConversionResult, convert_file, convert_image  # noqa: E402
from png2ico.errors import Png2IcoError  # noqa: E402
from png2ico.frames import FrameArtifact, build_frame, build_frames  # noqa: E402

__all__ = [
    "ContainerEntry",
    "ConversionResult",
    "DirectoryRecord",
    "FrameArtifact",
    "Png2IcoError",
    "build_frame",
    "build_frames",
    "convert_file",
    "convert_image",
    "read_entries",
    "write_container",
]
