SLICE_HEADER_SIZE = 4  # u32 part count
PART_HEADER_SIZE = 8  # u32 destination offset + u32 byte length

# Destination offsets are u32, so the deserialized stream can never exceed 4 GiB.
DESTINATION_ADDRESS_SPACE = 1 << 32

# Sanity limits observed on real Telegram Desktop caches (Dec 2022).
STRICT_MAX_PARTS_PER_SLICE = 80
STRICT_MAX_PART_SIZE = 128 * 1024

BYTE_ORDER_FORMATS = {
    "little": "<",
    "big": ">",
}

RECONSTRUCTION_RESPONSE_HEADERS = [
    "x-last-contiguous-offset",
    "x-trailing-byte-count",
    "x-buffer-size",
]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
