import struct

import pytest

from telegram_media_deserialize.deserializer import FrameReader, Part


def test_decodes_parts_in_slice_then_part_order(build_container):
    data = build_container([[(8, b"CCCC"), (0, b"AAAA")], [(4, b"BBBB")]])
    reader = FrameReader(data)

    parts = list(reader)

    assert [(p.destination_offset, p.byte_length) for p in parts] == [(8, 4), (0, 4), (4, 4)]
    assert [(p.slice_index, p.part_index) for p in parts] == [(0, 0), (0, 1), (1, 0)]
    assert [bytes(reader.payload(p)) for p in parts] == [b"CCCC", b"AAAA", b"BBBB"]
    assert reader.slice_count == 2
    assert reader.trailing_byte_count == 0


def test_payload_location_points_into_input(build_container):
    data = build_container([[(0, b"AAAA"), (4, b"BB")]])
    parts = list(FrameReader(data))

    # slice header (4) + part header (8)
    assert parts[0].payload_location == 12
    assert parts[1].payload_location == 12 + 4 + 8
    assert data[parts[1].payload_location : parts[1].payload_location + 2] == b"BB"


def test_zero_part_slice_then_short_trailer():
    reader = FrameReader(b"\x00\x00\x00\x00" + b"\xaa\xbb\xcc")

    assert list(reader) == []
    assert reader.slice_count == 1
    assert reader.trailing_byte_count == 3


def test_empty_input_has_no_trailing_bytes():
    reader = FrameReader(b"")

    assert list(reader) == []
    assert reader.slice_count == 0
    assert reader.trailing_byte_count == 0


def test_overdeclared_part_count_is_reported_as_trailing(build_container):
    good = build_container([[(0, b"AAAA")]])
    # Declares 5 parts but only carries one.
    bad = struct.pack("<I", 5) + struct.pack("<II", 4, 2) + b"BB"
    reader = FrameReader(good + bad)

    parts = list(reader)

    assert [p.destination_offset for p in parts] == [0]
    assert reader.slice_count == 1
    assert reader.trailing_byte_count == len(bad)


def test_truncated_payload_discards_the_whole_slice(build_container):
    good = build_container([[(0, b"AAAA")]])
    # First part of the slice is complete, second payload is cut short.
    bad = struct.pack("<I", 2) + struct.pack("<II", 4, 2) + b"BB" + struct.pack("<II", 6, 10) + b"CCC"
    reader = FrameReader(good + bad)

    parts = list(reader)

    assert len(parts) == 1
    assert reader.trailing_byte_count == len(bad)


def test_truncated_part_header(build_container):
    data = build_container([[(0, b"AAAA")]]) + struct.pack("<I", 1) + b"\x00\x00\x00"
    reader = FrameReader(data)

    assert len(list(reader)) == 1
    assert reader.trailing_byte_count == 7


def test_trailing_byte_count_unknown_until_exhausted(build_container):
    reader = FrameReader(build_container([[(0, b"AAAA")], [(4, b"BBBB")]]))
    iterator = iter(reader)
    next(iterator)

    assert not reader.exhausted
    with pytest.raises(RuntimeError):
        reader.trailing_byte_count

    list(iterator)
    assert reader.exhausted
    assert reader.trailing_byte_count == 0


def test_reader_is_single_pass(build_container):
    reader = FrameReader(build_container([[(0, b"AAAA")]]))
    list(reader)

    with pytest.raises(RuntimeError):
        iter(reader)


def test_big_endian_headers(build_container):
    data = build_container([[(0x01020304, b"XY")]], byte_order="big")

    parts = list(FrameReader(data, "big"))

    assert parts == [Part(0x01020304, 2, 12, 0, 0)]


def test_wrong_byte_order_yields_nonsense_sizes_not_errors(build_container):
    data = build_container([[(0, b"AAAA")]], byte_order="big")
    reader = FrameReader(data, "little")

    # A big-endian count of 1 reads as 16777216 little-endian parts, which cannot fit.
    assert list(reader) == []
    assert reader.trailing_byte_count == len(data)


def test_unknown_byte_order_rejected():
    with pytest.raises(ValueError):
        FrameReader(b"", "middle")


def test_max_parts_per_slice_stops_parsing(build_container):
    data = build_container([[(0, b"A")], [(1, b"B"), (2, b"C"), (3, b"D")]])
    reader = FrameReader(data, max_parts_per_slice=2)

    parts = list(reader)

    assert [p.destination_offset for p in parts] == [0]
    assert reader.trailing_byte_count == len(data) - (4 + 8 + 1)


def test_max_part_size_stops_parsing(build_container):
    data = build_container([[(0, b"AAAA")], [(4, b"B" * 16)]])
    reader = FrameReader(data, max_part_size=8)

    assert [p.byte_length for p in reader] == [4]
    assert reader.trailing_byte_count == 4 + 8 + 16


def test_zero_length_parts_are_decoded(build_container):
    data = build_container([[(100, b""), (0, b"A")]])

    parts = list(FrameReader(data))

    assert [(p.destination_offset, p.byte_length) for p in parts] == [(100, 0), (0, 1)]


def test_part_is_slotted_and_immutable():
    part = Part(destination_offset=4, byte_length=2, payload_location=12)

    assert not hasattr(part, "__dict__")
    assert part.destination_end == 6
    with pytest.raises((AttributeError, TypeError)):
        part.note = "extra"
