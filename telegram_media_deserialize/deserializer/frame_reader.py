"""
Slice/part decoder for Telegram Desktop streaming cache files.

A serialized cache is a sequence of *slices*, each holding one or more
*parts*:

    Slice := PartCount:u32 Part{PartCount}
    Part  := DestOffset:u32 ByteLength:u32 Payload[ByteLength]

followed by a handful of unexplained trailing bytes. Parts are not ordered
by destination offset: the desktop client emulates a media player, so a
forward seek (e.g. to an MP4 moov atom at the end of the file) shows up as a
part far ahead of the rest, backfilled in a later slice.

Slices are decoded atomically: no part is yielded until every header and
payload of its slice fits in the input. The first slice that does not fit
ends decoding, and everything from its start on is reported as trailing.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Iterator, Optional

from telegram_media_deserialize.const import BYTE_ORDER_FORMATS, PART_HEADER_SIZE, SLICE_HEADER_SIZE
from telegram_media_deserialize.deserializer.errors import TruncatedSliceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Part:
    """One (destination offset, length, payload location) record of a slice."""

    destination_offset: int
    byte_length: int
    payload_location: int  # Absolute input offset where the payload starts
    slice_index: int = 0
    part_index: int = 0

    @property
    def destination_end(self) -> int:
        return self.destination_offset + self.byte_length


class FrameReader:
    """
    Single forward pass over a serialized cache, yielding ``Part`` records.

    Iterate the reader once to get every part of every complete slice in
    decode order. Once exhausted, ``trailing_byte_count`` holds the number
    of input bytes that could not be decoded as a complete slice.

    Args:
        data: The whole (already decrypted) cache file.
        byte_order: ``"little"`` or ``"big"``, applied to every u32 header field.
        max_parts_per_slice: Treat a slice declaring more parts than this as
            the end of the container. ``None`` disables the check.
        max_part_size: Treat a part larger than this as the end of the
            container. ``None`` disables the check.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        byte_order: str = "little",
        *,
        max_parts_per_slice: Optional[int] = None,
        max_part_size: Optional[int] = None,
    ) -> None:
        if byte_order not in BYTE_ORDER_FORMATS:
            raise ValueError(f"Unsupported byte order {byte_order!r}, expected one of {sorted(BYTE_ORDER_FORMATS)}")

        prefix = BYTE_ORDER_FORMATS[byte_order]
        self._slice_header = struct.Struct(prefix + "I")
        self._part_header = struct.Struct(prefix + "II")
        self._data = memoryview(data)
        self.byte_order = byte_order
        self.max_parts_per_slice = max_parts_per_slice
        self.max_part_size = max_part_size

        self._cursor = 0
        self._slice_count = 0
        self._trailing_byte_count: Optional[int] = None
        self._started = False

    def __iter__(self) -> Iterator[Part]:
        if self._started:
            raise RuntimeError("FrameReader is a single forward pass and cannot be iterated twice")
        self._started = True
        return self._iter_parts()

    @property
    def cursor(self) -> int:
        """Input offset of the next slice to decode."""
        return self._cursor

    @property
    def slice_count(self) -> int:
        """Number of complete slices decoded so far."""
        return self._slice_count

    @property
    def exhausted(self) -> bool:
        return self._trailing_byte_count is not None

    @property
    def trailing_byte_count(self) -> int:
        """Input bytes left over after the last complete slice."""
        if self._trailing_byte_count is None:
            raise RuntimeError("trailing_byte_count is only known once the reader is exhausted")
        return self._trailing_byte_count

    def payload(self, part: Part) -> memoryview:
        """Zero-copy view of a part's payload in the input."""
        return self._data[part.payload_location : part.payload_location + part.byte_length]

    def _iter_parts(self) -> Iterator[Part]:
        total = len(self._data)
        while True:
            try:
                parts, next_cursor = self._decode_slice(self._cursor)
            except TruncatedSliceError as e:
                self._trailing_byte_count = total - self._cursor
                logger.info(
                    f"Stopped parsing at in_offset={self._cursor} after {self._slice_count} slices: {e.message} "
                    f"({self._trailing_byte_count} bytes remaining)"
                )
                return

            self._cursor = next_cursor
            self._slice_count += 1
            yield from parts

    def _decode_slice(self, position: int) -> tuple[list[Part], int]:
        """
        Decode the slice starting at ``position``.

        Returns:
            (parts, position right after the slice)

        Raises:
            TruncatedSliceError: The slice does not fit in the remaining input
                or breaks one of the configured sanity limits.
        """
        data = self._data
        total = len(data)
        slice_index = self._slice_count

        if position + SLICE_HEADER_SIZE > total:
            raise TruncatedSliceError(position, f"{total - position} bytes left, too few for a slice header")

        (part_count,) = self._slice_header.unpack_from(data, position)
        if self.max_parts_per_slice is not None and part_count > self.max_parts_per_slice:
            raise TruncatedSliceError(
                position,
                f"Slice{slice_index} parts={part_count} is above max allowed({self.max_parts_per_slice})",
            )
        logger.debug(f"Slice{slice_index}: in_offset={position}, parts={part_count}")

        pos = position + SLICE_HEADER_SIZE
        parts = []
        for part_index in range(part_count):
            if pos + PART_HEADER_SIZE > total:
                raise TruncatedSliceError(
                    position, f"Slice{slice_index}/Part{part_index} header at in_offset={pos} is cut short"
                )
            destination_offset, byte_length = self._part_header.unpack_from(data, pos)
            pos += PART_HEADER_SIZE

            if self.max_part_size is not None and byte_length > self.max_part_size:
                raise TruncatedSliceError(
                    position,
                    f"Slice{slice_index}/Part{part_index} part_size={byte_length} "
                    f"is above max allowed({self.max_part_size})",
                )
            if pos + byte_length > total:
                raise TruncatedSliceError(
                    position,
                    f"Slice{slice_index}/Part{part_index} payload of {byte_length} bytes "
                    f"at in_offset={pos} is cut short",
                )

            logger.debug(
                f"Slice{slice_index}/Part{part_index}: in_offset={pos}, "
                f"out_offset={destination_offset}, part_size={byte_length}"
            )
            parts.append(Part(destination_offset, byte_length, pos, slice_index, part_index))
            pos += byte_length

        return parts, pos
