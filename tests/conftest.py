"""
Pytest configuration for deserializer tests.

Settings overrides (e.g. BYTE_ORDER, LOG_LEVEL) can be placed in a local
.env file at the project root.
"""

import struct
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")


def encode_container(slices, trailing: bytes = b"", byte_order: str = "little") -> bytes:
    """
    Serialize ``slices`` (a list of lists of ``(destination_offset, payload)``)
    into the streaming cache layout, followed by ``trailing`` bytes.
    """
    prefix = "<" if byte_order == "little" else ">"
    out = bytearray()
    for parts in slices:
        out += struct.pack(prefix + "I", len(parts))
        for offset, payload in parts:
            out += struct.pack(prefix + "II", offset, len(payload))
            out += payload
    out += trailing
    return bytes(out)


@pytest.fixture
def build_container():
    """
    Factory fixture building serialized cache bytes.

    Usage:
        def test_something(build_container):
            data = build_container([[(0, b"AAAA")], [(4, b"BBBB")]], trailing=b"xyz")
    """
    return encode_container
