"""
Hashing Domain Values to Field Elements

The DomainToField capability: a deterministic map phi from arbitrary
values to nonzero field elements.

    phi(v) = OS2IP(expand(encode(v) || ctr, DST, L)) mod p

- encode: injective, type-tagged, length-prefixed value encoding
- expand: RFC 9380 expand_message_xmd (SHA-2) or expand_message_xof (BLAKE3)
- L: p's bit length plus security_bits, so the reduction bias is negligible
- ctr: retry counter, bumped only when the reduction lands on zero

Domain types may bypass the default map by implementing HashToField.
"""

from __future__ import annotations
from enum import Enum
from functools import lru_cache
from typing import Any, Optional, Protocol, runtime_checkable
import hashlib
import logging

from blake3 import blake3

from .field import DEFAULT_FIELD, FieldElement, PrimeField
from .tags import ValueTag, tag_bytes, DEFAULT_DST

logger = logging.getLogger(__name__)

# Counter is one byte
MAX_ATTEMPTS = 256


@runtime_checkable
class HashToField(Protocol):
    """A domain value that knows how to map itself into a field."""

    def hash_to_field(self, field: PrimeField) -> FieldElement: ...


@runtime_checkable
class DomainToField(Protocol):
    """A mapper from arbitrary values to nonzero field elements."""

    def map(self, value: Any) -> FieldElement: ...


class Expander(Enum):
    """Message expansion functions (RFC 9380 section 5.3)."""
    XMD_SHA256 = 'xmd:sha256'
    XMD_SHA512 = 'xmd:sha512'
    BLAKE3 = 'xof:blake3'


# =============================================================================
# Value Encoding
# =============================================================================

def _length(n: int) -> bytes:
    return n.to_bytes(8, 'big')


def encode_value(value: Any) -> bytes:
    """
    Encode a value to bytes, injectively across supported types.

    Supported: None, bool, int, bytes-like, str, and tuples/lists of these.
    """
    if value is None:
        return tag_bytes(ValueTag.NONE)
    if isinstance(value, bool):
        return tag_bytes(ValueTag.BOOL) + (b'\x01' if value else b'\x00')
    if isinstance(value, int):
        data = value.to_bytes((value.bit_length() + 8) // 8, 'big', signed=True)
        return tag_bytes(ValueTag.INT) + _length(len(data)) + data
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return tag_bytes(ValueTag.BYTES) + _length(len(data)) + data
    if isinstance(value, str):
        data = value.encode('utf-8')
        return tag_bytes(ValueTag.STRING) + _length(len(data)) + data
    if isinstance(value, (tuple, list)):
        parts = [tag_bytes(ValueTag.SEQUENCE), _length(len(value))]
        parts.extend(encode_value(item) for item in value)
        return b''.join(parts)
    raise TypeError(f"Cannot encode {type(value).__name__} for hashing to a field")


# =============================================================================
# Message Expansion (RFC 9380)
# =============================================================================

def _dst_prime(dst: bytes) -> bytes:
    if len(dst) > 255:
        raise ValueError(f"DST must be at most 255 bytes, got {len(dst)}")
    return dst + len(dst).to_bytes(1, 'big')


def expand_message_xmd(msg: bytes, dst: bytes, length: int, hash_name: str = 'sha256') -> bytes:
    """
    expand_message_xmd from RFC 9380 section 5.3.1.

    Produces `length` uniform bytes from a Merkle-Damgard hash.
    """
    b_in_bytes = hashlib.new(hash_name).digest_size
    s_in_bytes = hashlib.new(hash_name).block_size
    ell = -(-length // b_in_bytes)
    if ell > 255 or length > 65535:
        raise ValueError(f"Requested length {length} too large for {hash_name}")
    dst_prime = _dst_prime(dst)

    msg_prime = (
        bytes(s_in_bytes)
        + msg
        + length.to_bytes(2, 'big')
        + b'\x00'
        + dst_prime
    )
    b_0 = hashlib.new(hash_name, msg_prime).digest()
    b_i = hashlib.new(hash_name, b_0 + b'\x01' + dst_prime).digest()

    uniform = [b_i]
    for i in range(2, ell + 1):
        mixed = bytes(x ^ y for x, y in zip(b_0, b_i))
        b_i = hashlib.new(hash_name, mixed + i.to_bytes(1, 'big') + dst_prime).digest()
        uniform.append(b_i)

    return b''.join(uniform)[:length]


def expand_message_blake3(msg: bytes, dst: bytes, length: int) -> bytes:
    """
    expand_message_xof from RFC 9380 section 5.3.2, with BLAKE3 as the XOF.
    """
    if length > 65535:
        raise ValueError(f"Requested length {length} too large")
    h = blake3()
    h.update(msg)
    h.update(length.to_bytes(2, 'big'))
    h.update(_dst_prime(dst))
    return h.digest(length=length)


# =============================================================================
# Hasher
# =============================================================================

class FieldHasher:
    """
    Default DomainToField implementation.

    Example:
        >>> hasher = FieldHasher(BLS12_381_SCALAR)
        >>> e = hasher.map("alice")
        >>> assert e == hasher.map("alice") and not e.is_zero()
    """

    def __init__(
        self,
        field: PrimeField = DEFAULT_FIELD,
        dst: bytes = DEFAULT_DST,
        expander: Expander = Expander.XMD_SHA256,
    ):
        self.field = field
        self.dst = bytes(dst)
        self.expander = expander if isinstance(expander, Expander) else Expander(expander)
        # Validate the DST once rather than on every call
        _dst_prime(self.dst)

    def __repr__(self) -> str:
        return f"FieldHasher({self.field.name}, dst={self.dst!r}, expander={self.expander.value})"

    def expand(self, msg: bytes) -> bytes:
        length = self.field.params.hash_length
        if self.expander is Expander.BLAKE3:
            return expand_message_blake3(msg, self.dst, length)
        hash_name = self.expander.value.split(':', 1)[1]
        return expand_message_xmd(msg, self.dst, length, hash_name)

    def map(self, value: Any) -> FieldElement:
        """Hash `value` to a nonzero element of the field."""
        encoded = encode_value(value)
        for counter in range(MAX_ATTEMPTS):
            uniform = self.expand(encoded + counter.to_bytes(1, 'big'))
            element = self.field.element(int.from_bytes(uniform, 'big'))
            if not element.is_zero():
                return element
            logger.debug("hash to %s landed on zero, retrying (attempt %d)",
                         self.field.name, counter + 1)
        raise RuntimeError(f"Could not hash to a nonzero element of {self.field.name}")


@lru_cache(maxsize=None)
def default_hasher(field: PrimeField = DEFAULT_FIELD) -> FieldHasher:
    """Shared FieldHasher with the default DST for `field`."""
    return FieldHasher(field)


def hash_to_field(
    value: Any,
    field: PrimeField = DEFAULT_FIELD,
    mapper: Optional[DomainToField] = None,
) -> FieldElement:
    """
    Map a domain value into `field`.

    HashToField values map themselves; otherwise `mapper` is used, falling
    back to the default hasher for the field.
    """
    if isinstance(value, HashToField):
        return field.check(value.hash_to_field(field))
    if mapper is None:
        mapper = default_hasher(field)
    return field.check(mapper.map(value))
