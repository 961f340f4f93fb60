class DeserializeError(Exception):
    """Base exception for streaming cache deserialization."""
    pass


class TruncatedSliceError(DeserializeError):
    """The remaining input cannot hold one more complete slice.

    Raised while decoding a slice and always absorbed by ``FrameReader``,
    which turns it into the trailing byte count.
    """

    def __init__(self, position: int, message: str):
        self.position = position
        self.message = message
        super().__init__(message)


class DestinationOverflowError(DeserializeError):
    """A part would write past the representable destination address space."""

    def __init__(self, destination_offset: int, byte_length: int, limit: int):
        self.destination_offset = destination_offset
        self.byte_length = byte_length
        self.limit = limit
        super().__init__(
            f"part at destination offset {destination_offset} with {byte_length} bytes "
            f"ends at {destination_offset + byte_length}, beyond the destination limit of {limit} bytes"
        )
