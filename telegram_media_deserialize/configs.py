from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from telegram_media_deserialize.const import (
    DESTINATION_ADDRESS_SPACE,
    STRICT_MAX_PART_SIZE,
    STRICT_MAX_PARTS_PER_SLICE,
)


class Settings(BaseSettings):
    api_password: str | None = None  # The password for protecting the API endpoints.
    log_level: str = "INFO"  # The logging level to use.
    disable_docs: bool = False  # Whether to disable the API documentation (Swagger UI).
    byte_order: Literal["little", "big"] = "little"  # Byte order of the u32 header fields in the cache.
    fill_byte: int = Field(0, ge=0, le=255, description="Placeholder byte for never-written destination gaps.")
    max_parts_per_slice: Optional[int] = Field(
        None, ge=1, description="Stop decoding at a slice declaring more parts than this. None disables the check."
    )
    max_part_size: Optional[int] = Field(
        None, ge=1, description="Stop decoding at a part larger than this. None disables the check."
    )
    strict_max_parts_per_slice: int = STRICT_MAX_PARTS_PER_SLICE  # Part count limit used by --strict-limits.
    strict_max_part_size: int = STRICT_MAX_PART_SIZE  # Part size limit used by --strict-limits.
    max_destination_size: int = Field(
        DESTINATION_ADDRESS_SPACE,
        ge=1,
        le=DESTINATION_ADDRESS_SPACE,
        description="Largest destination stream size a reconstruction may grow to.",
    )
    max_input_size: int = 512 * 1024 * 1024  # Maximum accepted request body size for the HTTP API.
    max_output_size: int = Field(
        512 * 1024 * 1024,
        ge=1,
        le=DESTINATION_ADDRESS_SPACE,
        description="Largest destination stream the HTTP API will reconstruct for a single request.",
    )

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
