import logging

from telegram_media_deserialize.const import DESTINATION_ADDRESS_SPACE
from telegram_media_deserialize.deserializer.coverage import CoverageTracker
from telegram_media_deserialize.deserializer.errors import DestinationOverflowError

logger = logging.getLogger(__name__)


class StreamBuilder:
    """
    Random-access writer for the deserialized media stream.

    The buffer grows to fit every write and never shrinks. Bytes that were
    never written hold ``fill_byte`` and are only meaningful where
    ``coverage`` says so. Overlapping writes are last-write-wins.
    """

    def __init__(self, fill_byte: int = 0, max_size: int = DESTINATION_ADDRESS_SPACE) -> None:
        if not 0 <= fill_byte <= 0xFF:
            raise ValueError(f"fill_byte must be a single byte value, got {fill_byte}")
        self._buffer = bytearray()
        self._coverage = CoverageTracker()
        self._fill = bytes([fill_byte])
        self.max_size = min(max_size, DESTINATION_ADDRESS_SPACE)

    @property
    def buffer(self) -> bytearray:
        return self._buffer

    @property
    def coverage(self) -> CoverageTracker:
        return self._coverage

    @property
    def last_contiguous_offset(self) -> int:
        return self._coverage.contiguous_prefix_length()

    def write(self, destination_offset: int, payload: bytes | bytearray | memoryview) -> None:
        length = len(payload)
        end = destination_offset + length
        if destination_offset < 0 or end > self.max_size:
            logger.error(f"Refusing to write {length} bytes at out_offset={destination_offset}")
            raise DestinationOverflowError(destination_offset, length, self.max_size)

        if end > len(self._buffer):
            self._buffer.extend(self._fill * (end - len(self._buffer)))
        self._buffer[destination_offset:end] = payload
        self._coverage.merge(destination_offset, end)
