import pytest

from conftest import unpack_entry, unpack_header
from png2ico import container
from png2ico.container import (
    ContainerEntry,
    decode_dimension,
    encode_dimension,
    plan_entries,
    read_entries,
    read_payload,
    write_container,
)
from png2ico.errors import (
    ContainerFormatError,
    InvalidSize,
    NoFrames,
    SizeOverflow,
    TooManyFrames,
)
from png2ico.frames import FrameArtifact


class SizedPayload(bytes):
    """Empty bytes that report an arbitrary length."""

    def __new__(cls, length):
        obj = super().__new__(cls, b"")
        obj.length = length
        return obj

    def __len__(self):
        return self.length


def frames_of(*specs):
    return [FrameArtifact(edge, payload) for edge, payload in specs]


# =============================================================================
# DIMENSION ENCODING
# =============================================================================

def test_encode_dimension():
    assert encode_dimension(256) == 0
    assert encode_dimension(255) == 255
    assert encode_dimension(16) == 16
    assert encode_dimension(1) == 1


@pytest.mark.parametrize("edge", [0, 257])
def test_encode_dimension_out_of_range(edge):
    with pytest.raises(InvalidSize):
        encode_dimension(edge)


def test_decode_dimension():
    assert decode_dimension(0) == 256
    assert decode_dimension(48) == 48


# =============================================================================
# WRITING
# =============================================================================

def test_write_container_layout():
    data = write_container(frames_of((16, b"a" * 10), (256, b"b" * 20)))

    assert unpack_header(data) == (0, 1, 2)
    assert unpack_entry(data, 0) == (16, 16, 0, 0, 1, 32, 10, 38)
    assert unpack_entry(data, 1) == (0, 0, 0, 0, 1, 32, 20, 48)
    assert data[38:48] == b"a" * 10
    assert data[48:68] == b"b" * 20
    assert len(data) == 68


def test_write_container_offsets_follow_payload_sizes():
    payloads = [b"x" * n for n in (5, 0, 17, 1, 300)]
    frames = frames_of(*zip((16, 24, 32, 48, 64), payloads))
    data = write_container(frames)

    count = len(frames)
    assert unpack_header(data)[2] == count
    for i in range(count):
        entry = unpack_entry(data, i)
        assert entry[6] == len(payloads[i])
        assert entry[7] == 6 + 16 * count + sum(len(p) for p in payloads[:i])


def test_write_container_single_frame():
    data = write_container(frames_of((1, b"\x01")))
    assert unpack_header(data) == (0, 1, 1)
    assert unpack_entry(data, 0) == (1, 1, 0, 0, 1, 32, 1, 22)
    assert data[22:] == b"\x01"


def test_write_container_allows_duplicate_edges():
    data = write_container(frames_of((32, b"one"), (32, b"two")))
    assert [e.width for e in read_entries(data)] == [32, 32]


def test_write_container_rejects_no_frames():
    with pytest.raises(NoFrames):
        write_container([])


def test_write_container_rejects_too_many_frames():
    frame = FrameArtifact(16, b"")
    assert len(plan_entries([frame] * 0xFFFF)) == 0xFFFF
    with pytest.raises(TooManyFrames):
        write_container([frame] * 0x10000)


def test_payload_size_overflow():
    with pytest.raises(SizeOverflow):
        write_container([FrameArtifact(16, SizedPayload(2 ** 32))])


def test_payload_offset_overflow():
    # First payload fits, but pushes the second offset past 0xFFFFFFFF
    frames = [
        FrameArtifact(16, SizedPayload(0xFFFFFFFF - 10)),
        FrameArtifact(32, b"tail"),
    ]
    with pytest.raises(SizeOverflow, match="offset"):
        plan_entries(frames)


def test_plan_entries_matches_written_directory():
    frames = frames_of((16, b"a" * 3), (256, b"b" * 4))
    assert plan_entries(frames) == [
        ContainerEntry(16, 3, 38),
        ContainerEntry(256, 4, 41),
    ]


def test_entry_encoded_dimensions():
    entry = ContainerEntry(256, 10, 22)
    assert entry.encoded_width == 0
    assert entry.encoded_height == 0
    assert ContainerEntry(48, 10, 22).encoded_width == 48


# =============================================================================
# READING
# =============================================================================

def test_read_entries_and_payloads():
    frames = frames_of((16, b"sixteen"), (32, b"thirty-two"), (256, b"big"))
    data = write_container(frames)

    entries = read_entries(data)
    assert [(e.width, e.height, e.bit_count) for e in entries] == [(16, 16, 32), (32, 32, 32), (256, 256, 32)]
    assert [read_payload(data, e) for e in entries] == [b"sixteen", b"thirty-two", b"big"]


@pytest.mark.parametrize("data", [
    b"",
    b"\x00\x00\x01",
    b"\x00\x00\x02\x00\x01\x00" + bytes(16),   # cursor type
    b"\x01\x00\x01\x00\x01\x00" + bytes(16),   # non-zero reserved
    b"\x00\x00\x01\x00\x02\x00" + bytes(16),   # directory truncated
])
def test_read_entries_rejects_malformed(data):
    with pytest.raises(ContainerFormatError):
        read_entries(data)


def test_read_entries_rejects_payload_past_end():
    data = bytearray(write_container(frames_of((16, b"abcd"))))
    with pytest.raises(ContainerFormatError):
        read_entries(bytes(data[:-1]))


def test_read_entries_keeps_non_square_entries():
    data = bytearray(write_container(frames_of((16, b"x" * 16))))
    data[7] = 32  # height byte of entry 0

    [record] = read_entries(bytes(data))
    assert (record.width, record.height) == (16, 32)
    assert read_payload(bytes(data), record) == b"x" * 16


def test_read_entries_decodes_zero_as_256():
    data = bytearray(write_container(frames_of((16, b"abc"))))
    data[6] = 0
    data[7] = 0

    [record] = read_entries(bytes(data))
    assert (record.width, record.height) == (256, 256)


def test_write_container_detects_offset_drift(monkeypatch):
    def shifted(frames):
        return [ContainerEntry(e.edge, e.payload_size, e.payload_offset + 1) for e in plan_entries(frames)]

    monkeypatch.setattr(container, "plan_entries", shifted)
    with pytest.raises(RuntimeError, match="planned"):
        container.write_container(frames_of((16, b"abc")))
