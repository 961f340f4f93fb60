"""
Human-oriented summary of a reconstruction.

Parts are sorted by destination offset here for reporting only; they are
always applied in decode order by the reconstructor.
"""

import logging
from typing import Optional

from telegram_media_deserialize.deserializer.frame_reader import Part
from telegram_media_deserialize.deserializer.reconstructor import ReconstructionResult
from telegram_media_deserialize.schemas import CacheReport, PartInfo

logger = logging.getLogger(__name__)


def _part_info(part: Optional[Part]) -> Optional[PartInfo]:
    if part is None:
        return None
    return PartInfo(
        slice_index=part.slice_index,
        part_index=part.part_index,
        in_offset=part.payload_location,
        out_offset=part.destination_offset,
        part_size=part.byte_length,
    )


def build_report(result: ReconstructionResult, byte_order: str = "little") -> CacheReport:
    """
    Summarise a reconstruction result.

    Args:
        result: The finished reconstruction.
        byte_order: Byte order the cache was decoded with, echoed in the report.

    Returns:
        CacheReport: first/last parts by destination offset, the part ending at
        the last contiguous offset, the discontinuity after it, coverage and gaps.
    """
    ordered = sorted(result.parts, key=lambda p: (p.destination_offset, p.byte_length))
    first_part = ordered[0] if ordered else None
    last_part = ordered[-1] if ordered else None

    # Latest-decoded part ending exactly at the prefix boundary.
    last_contiguous_part = None
    for part in result.parts:
        if part.byte_length and part.destination_end == result.last_contiguous_offset:
            last_contiguous_part = part

    discontinuity = 0
    if last_part is not None:
        discontinuity = max(0, last_part.destination_offset - result.last_contiguous_offset)

    report = CacheReport(
        byte_order=byte_order,
        slice_count=result.slice_count,
        part_count=len(result.parts),
        buffer_size=result.buffer_size,
        covered_bytes=result.covered_bytes,
        last_contiguous_offset=result.last_contiguous_offset,
        discontinuity=discontinuity,
        trailing_byte_count=result.trailing_byte_count,
        first_part=_part_info(first_part),
        last_contiguous_part=_part_info(last_contiguous_part),
        last_part=_part_info(last_part),
        coverage=list(result.coverage),
        gaps=result.gaps(),
    )
    logger.info(
        f"Last contiguous offset: {report.last_contiguous_offset} (Discontinuity: {report.discontinuity} bytes)"
    )
    return report
