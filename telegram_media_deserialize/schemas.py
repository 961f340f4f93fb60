from typing import Literal, Optional

from pydantic import BaseModel, Field


class PartInfo(BaseModel):
    slice_index: int = Field(..., description="Index of the slice the part was decoded from.")
    part_index: int = Field(..., description="Index of the part within its slice.")
    in_offset: int = Field(..., description="Input offset where the part payload starts.")
    out_offset: int = Field(..., description="Destination offset the payload is written to.")
    part_size: int = Field(..., description="Payload size in bytes.")


class CacheReport(BaseModel):
    byte_order: Literal["little", "big"] = Field(..., description="Byte order used to decode the header fields.")
    slice_count: int = Field(..., description="Number of complete slices decoded.")
    part_count: int = Field(..., description="Number of parts applied.")
    buffer_size: int = Field(..., description="Size of the reconstructed buffer, gaps included.")
    covered_bytes: int = Field(..., description="Bytes written by at least one part.")
    last_contiguous_offset: int = Field(..., description="End of the gap-free prefix starting at offset 0.")
    discontinuity: int = Field(
        0, description="Distance from the last contiguous offset to the highest part offset, 0 when contiguous."
    )
    trailing_byte_count: int = Field(..., description="Unparsed input bytes after the last complete slice.")
    first_part: Optional[PartInfo] = Field(None, description="Part with the lowest destination offset.")
    last_contiguous_part: Optional[PartInfo] = Field(
        None, description="Part whose payload ends at the last contiguous offset."
    )
    last_part: Optional[PartInfo] = Field(None, description="Part with the highest destination offset.")
    coverage: list[tuple[int, int]] = Field(default_factory=list, description="Written [start, end) ranges.")
    gaps: list[tuple[int, int]] = Field(default_factory=list, description="Unwritten [start, end) ranges in the buffer.")
