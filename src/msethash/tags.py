"""
Domain Tags for Value Encoding

Every encoded value starts with a tag so that values of different
types never share an encoding (b"1", "1" and 1 are distinct).
These tags are PINNED - changing them changes every hash.
"""

from enum import IntEnum


class ValueTag(IntEnum):
    """Type tags for encode_value."""

    NONE = 0x00
    BOOL = 0x01
    INT = 0x02
    BYTES = 0x03
    STRING = 0x04
    SEQUENCE = 0x10


def tag_bytes(tag: ValueTag) -> bytes:
    """Convert tag to canonical bytes (1 byte)."""
    return tag.to_bytes(1, 'big')


# Default domain separation tag for hash-to-field (RFC 9380 section 3.1).
DEFAULT_DST = b"MSETHASH-V01-H2F"
