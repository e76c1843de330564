#!/usr/bin/env python3
"""
png2ico - Icon Container Writer

Serializes PNG frames into a Windows ICO container.

Layout (little-endian throughout):
    ICONDIR        6 bytes    reserved=0, type=1, count=N
    ICONDIRENTRY   16 bytes   one per frame, in payload order
    payloads                  concatenated, no padding

Directory entries hold absolute payload offsets, which depend on the sizes
of every earlier payload. The writer reserves the directory, appends the
payloads, then seeks back and patches the entries in place.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from io import BytesIO
from typing import List, Sequence

from png2ico import config
from png2ico.errors import (
    ContainerFormatError,
    InvalidSize,
    NoFrames,
    SizeOverflow,
    TooManyFrames,
)
from png2ico.frames import FrameArtifact

HEADER = struct.Struct("<HHH")
# width, height, colors, reserved, planes, bit count, size, offset
ENTRY = struct.Struct("<BBBBHHII")

ICON_TYPE = 1
PLANES = 1
BITS_PER_PIXEL = 32

_U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class ContainerEntry:
    """A frame's directory record with its resolved payload position."""

    edge: int
    payload_size: int
    payload_offset: int

    @property
    def encoded_width(self) -> int:
        return encode_dimension(self.edge)

    @property
    def encoded_height(self) -> int:
        return encode_dimension(self.edge)

    def pack(self) -> bytes:
        return ENTRY.pack(
            self.encoded_width,
            self.encoded_height,
            0,                    # Color count (0 = no palette)
            0,                    # Reserved
            PLANES,
            BITS_PER_PIXEL,
            self.payload_size,
            self.payload_offset,
        )


def encode_dimension(edge: int) -> int:
    """Encode an edge for a single-byte field (256 is stored as 0)."""
    if edge < config.MIN_EDGE or edge > config.MAX_EDGE:
        raise InvalidSize(edge)
    return 0 if edge == 256 else edge


def decode_dimension(value: int) -> int:
    """Inverse of encode_dimension()."""
    return 256 if value == 0 else value


def directory_size(count: int) -> int:
    """Bytes occupied by the header plus count directory entries."""
    return HEADER.size + ENTRY.size * count


# =============================================================================
# LAYOUT
# =============================================================================

def plan_entries(frames: Sequence[FrameArtifact]) -> List[ContainerEntry]:
    """
    Resolve every frame's payload size and offset.

    This is the only place offsets are computed; write_container() checks
    the actual stream positions against it.

    Raises:
        NoFrames: If frames is empty.
        TooManyFrames: If there are more than 65535 frames.
        SizeOverflow: If any payload size or offset exceeds a u32.
        InvalidSize: If a frame edge cannot be encoded.
    """
    count = len(frames)
    if count == 0:
        raise NoFrames("An icon container needs at least one frame.")
    if count > config.MAX_FRAMES:
        raise TooManyFrames(f"{count} frames exceed the {config.MAX_FRAMES} directory limit.")

    entries = []
    offset = directory_size(count)
    for frame in frames:
        encode_dimension(frame.edge)
        size = len(frame.payload)
        if size > _U32_MAX:
            raise SizeOverflow(f"{frame.edge}x{frame.edge} payload is {size} bytes (max {_U32_MAX}).")
        if offset > _U32_MAX:
            raise SizeOverflow(f"{frame.edge}x{frame.edge} payload offset {offset} exceeds {_U32_MAX}.")
        entries.append(ContainerEntry(frame.edge, size, offset))
        offset += size

    return entries


# =============================================================================
# WRITING
# =============================================================================

def write_container(frames: Sequence[FrameArtifact]) -> bytes:
    """
    Serialize frames into a complete icon container.

    Args:
        frames: Frames in the order they should appear (normally ascending
            edge). Duplicate edges are written as given.

    Returns:
        The container bytes, ready to be written in one go.

    Raises:
        NoFrames, TooManyFrames, SizeOverflow: Before anything is written.
    """
    entries = plan_entries(frames)

    buf = BytesIO()
    buf.write(HEADER.pack(0, ICON_TYPE, len(entries)))

    # Reserve the directory; patched once payloads are in place
    dir_start = buf.tell()
    buf.write(bytes(ENTRY.size * len(entries)))

    for frame, entry in zip(frames, entries):
        if buf.tell() != entry.payload_offset:
            raise RuntimeError(
                f"payload for {entry.edge} starts at {buf.tell()}, planned {entry.payload_offset}"
            )
        buf.write(frame.payload)

    buf.seek(dir_start)
    for entry in entries:
        buf.write(entry.pack())

    return buf.getvalue()


# =============================================================================
# READING
# =============================================================================

@dataclass(frozen=True)
class DirectoryRecord:
    """A directory entry as found in an existing icon container."""

    width: int
    height: int
    bit_count: int
    payload_size: int
    payload_offset: int


def read_entries(data: bytes) -> List[DirectoryRecord]:
    """
    Parse the directory of an icon container.

    Entries written by other tools may be non-square or carry BMP payloads;
    both are returned as found.

    Args:
        data: The whole container.

    Returns:
        One record per directory entry, in directory order, with 0 widths
        and heights decoded as 256.

    Raises:
        ContainerFormatError: If the header or directory is malformed or an
            entry points outside the data.
    """
    if len(data) < HEADER.size:
        raise ContainerFormatError(f"Too short for an icon header ({len(data)} bytes).")

    reserved, kind, count = HEADER.unpack_from(data, 0)
    if reserved != 0 or kind != ICON_TYPE:
        raise ContainerFormatError(f"Not an icon container (reserved={reserved}, type={kind}).")
    if len(data) < directory_size(count):
        raise ContainerFormatError(f"Directory for {count} entries is truncated.")

    records = []
    for i in range(count):
        width, height, _, _, _, bit_count, size, offset = ENTRY.unpack_from(data, HEADER.size + ENTRY.size * i)
        if offset + size > len(data):
            raise ContainerFormatError(f"Entry {i} payload runs past end of data.")
        records.append(DirectoryRecord(
            decode_dimension(width), decode_dimension(height), bit_count, size, offset,
        ))

    return records


def read_payload(data: bytes, record: DirectoryRecord) -> bytes:
    """Slice one entry's payload out of the container bytes."""
    return data[record.payload_offset:record.payload_offset + record.payload_size]
