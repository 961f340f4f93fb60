"""
Streaming cache deserializer package.

Pure Python reconstruction of Telegram Desktop's serialized media cache:

- frame_reader: Slice/part decoder with trailing byte accounting
- coverage: Sorted, merged destination range tracking
- stream_builder: Growable destination buffer with last-write-wins writes
- reconstructor: Pipeline state machine producing the ReconstructionResult
- report: Summary of first/last/last-contiguous parts and gaps
"""

from .errors import DeserializeError, DestinationOverflowError, TruncatedSliceError
from .frame_reader import FrameReader, Part
from .coverage import CoverageTracker
from .stream_builder import StreamBuilder
from .reconstructor import (
    ReconstructionProgress,
    ReconstructionResult,
    Reconstructor,
    ReconstructorState,
    reconstruct,
)
from .report import build_report

__all__ = [
    "DeserializeError",
    "DestinationOverflowError",
    "TruncatedSliceError",
    "FrameReader",
    "Part",
    "CoverageTracker",
    "StreamBuilder",
    "ReconstructionProgress",
    "ReconstructionResult",
    "Reconstructor",
    "ReconstructorState",
    "reconstruct",
    "build_report",
]
