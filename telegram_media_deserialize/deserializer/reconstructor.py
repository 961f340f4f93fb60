"""
Streaming cache reconstruction pipeline.

Drives ``FrameReader`` part by part, applies every part through
``StreamBuilder`` strictly in decode order (never sorted by destination
offset, so last-write-wins follows the recorded seek pattern), and
assembles the terminal ``ReconstructionResult``.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from telegram_media_deserialize.configs import settings
from telegram_media_deserialize.deserializer.coverage import ByteRange, CoverageTracker, missing_ranges
from telegram_media_deserialize.deserializer.frame_reader import FrameReader, Part
from telegram_media_deserialize.deserializer.stream_builder import StreamBuilder

logger = logging.getLogger(__name__)


class ReconstructorState(str, enum.Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ReconstructionProgress:
    """Snapshot emitted after each applied part."""

    part: Part
    last_contiguous_offset: int
    buffer_size: int


@dataclass(frozen=True)
class ReconstructionResult:
    """
    Terminal output of a reconstruction.

    Only ``buffer[:last_contiguous_offset]`` is guaranteed gap-free; bytes in
    ``gaps()`` are placeholders and must not be trusted.
    """

    buffer: bytearray
    last_contiguous_offset: int
    trailing_byte_count: int
    coverage: tuple[ByteRange, ...] = ()
    parts: tuple[Part, ...] = field(default=(), repr=False)
    slice_count: int = 0

    @property
    def buffer_size(self) -> int:
        return len(self.buffer)

    @property
    def covered_bytes(self) -> int:
        return sum(end - start for start, end in self.coverage)

    def contiguous_bytes(self) -> bytes:
        """The gap-free prefix, safe to append continuation data to."""
        return bytes(self.buffer[: self.last_contiguous_offset])

    def gaps(self) -> list[ByteRange]:
        """Ranges inside the buffer that no part ever wrote."""
        return missing_ranges(self.coverage, len(self.buffer))


class Reconstructor:
    """
    Rebuilds a linear media stream from a serialized streaming cache.

    States move ``IDLE -> STREAMING -> DONE`` on success, or end in
    ``FAILED`` when applying a part raises or ``iter_apply`` is closed
    before the last part. A reconstructor runs once.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        byte_order: str = "little",
        *,
        max_parts_per_slice: Optional[int] = None,
        max_part_size: Optional[int] = None,
        fill_byte: int = 0,
        max_destination_size: Optional[int] = None,
    ) -> None:
        self._reader = FrameReader(
            data,
            byte_order,
            max_parts_per_slice=max_parts_per_slice,
            max_part_size=max_part_size,
        )
        if max_destination_size is None:
            self._builder = StreamBuilder(fill_byte)
        else:
            self._builder = StreamBuilder(fill_byte, max_destination_size)
        self._parts: list[Part] = []
        self._state = ReconstructorState.IDLE
        self._result: Optional[ReconstructionResult] = None

    @property
    def state(self) -> ReconstructorState:
        return self._state

    @property
    def last_contiguous_offset(self) -> int:
        return self._builder.last_contiguous_offset

    @property
    def coverage(self) -> CoverageTracker:
        """Destination ranges written so far; live while streaming."""
        return self._builder.coverage

    @property
    def result(self) -> Optional[ReconstructionResult]:
        return self._result

    def iter_apply(self) -> Iterator[ReconstructionProgress]:
        """
        Apply parts one at a time, yielding progress after each write.

        Raises:
            RuntimeError: The reconstructor has already been started.
            DestinationOverflowError: A part does not fit the destination address space.
        """
        if self._state is not ReconstructorState.IDLE:
            raise RuntimeError(f"Reconstructor cannot start from state {self._state.value}")
        self._state = ReconstructorState.STREAMING

        try:
            for part in self._reader:
                self._builder.write(part.destination_offset, self._reader.payload(part))
                self._parts.append(part)
                yield ReconstructionProgress(part, self._builder.last_contiguous_offset, len(self._builder.buffer))

            self._result = ReconstructionResult(
                buffer=self._builder.buffer,
                last_contiguous_offset=self._builder.last_contiguous_offset,
                trailing_byte_count=self._reader.trailing_byte_count,
                coverage=self._builder.coverage.ranges,
                parts=tuple(self._parts),
                slice_count=self._reader.slice_count,
            )
            self._state = ReconstructorState.DONE
            logger.info(
                f"Reconstructed {len(self._parts)} parts from {self._reader.slice_count} slices: "
                f"buffer_size={self._result.buffer_size}, "
                f"last_contiguous_offset={self._result.last_contiguous_offset}, "
                f"trailing_bytes={self._result.trailing_byte_count}"
            )
        finally:
            # Raised or abandoned part-way: no partial result survives.
            if self._state is ReconstructorState.STREAMING:
                self._state = ReconstructorState.FAILED
                logger.warning(f"Reconstruction stopped after {len(self._parts)} parts")

    def run(self) -> ReconstructionResult:
        for _ in self.iter_apply():
            pass
        return self._result


FROM_SETTINGS: Any = object()


def reconstruct(
    data: bytes | bytearray | memoryview,
    byte_order: Optional[str] = None,
    *,
    max_parts_per_slice: Optional[int] = FROM_SETTINGS,
    max_part_size: Optional[int] = FROM_SETTINGS,
    fill_byte: Optional[int] = None,
    max_destination_size: Optional[int] = None,
) -> ReconstructionResult:
    """
    Reconstruct a serialized cache in one call, taking unset options from settings.

    Args:
        data: The decrypted cache file contents.
        byte_order: ``"little"`` or ``"big"``. Defaults to ``settings.byte_order``.
        max_parts_per_slice: Part count sanity limit. Defaults to
            ``settings.max_parts_per_slice``; pass ``None`` to disable it.
        max_part_size: Part size sanity limit. Defaults to
            ``settings.max_part_size``; pass ``None`` to disable it.
        fill_byte: Placeholder for gap bytes. Defaults to ``settings.fill_byte``.
        max_destination_size: Defaults to ``settings.max_destination_size``.

    Returns:
        ReconstructionResult: buffer, last contiguous offset and trailing byte count.
    """
    if max_parts_per_slice is FROM_SETTINGS:
        max_parts_per_slice = settings.max_parts_per_slice
    if max_part_size is FROM_SETTINGS:
        max_part_size = settings.max_part_size
    return Reconstructor(
        data,
        byte_order or settings.byte_order,
        max_parts_per_slice=max_parts_per_slice,
        max_part_size=max_part_size,
        fill_byte=fill_byte if fill_byte is not None else settings.fill_byte,
        max_destination_size=(
            max_destination_size if max_destination_size is not None else settings.max_destination_size
        ),
    ).run()
