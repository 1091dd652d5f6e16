"""
Field Parameters for Multiset Hashing

FieldParams pins down the prime field a MultisetHash lives in.
A hash is only comparable with hashes built over the same parameters,
so the parameters are immutable and take part in equality.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldParams:
    """
    Public parameters of a prime field F_p.

    The multiplicative group F_p* has order p - 1, which bounds the
    collision probability of the multiset hash.
    """

    name: str
    """Human-readable identifier, used in repr and error messages."""

    modulus: int
    """The prime p."""

    security_bits: int = 128
    """Extra bits drawn when hashing to the field, keeping the bias below 2^-security_bits."""

    def __post_init__(self):
        if self.modulus < 2:
            raise ValueError(f"Modulus must be at least 2, got {self.modulus}")
        if self.security_bits <= 0:
            raise ValueError(f"security_bits must be positive, got {self.security_bits}")

    @property
    def bit_length(self) -> int:
        return self.modulus.bit_length()

    @property
    def byte_length(self) -> int:
        """Size of a canonical element encoding in bytes."""
        return (self.bit_length + 7) // 8

    @property
    def group_order(self) -> int:
        """Order of the multiplicative group."""
        return self.modulus - 1

    @property
    def hash_length(self) -> int:
        """
        Bytes of uniform output needed per field element (RFC 9380, L).

        L = ceil((ceil(log2(p)) + k) / 8)
        """
        return (self.bit_length + self.security_bits + 7) // 8

    def collision_bound(self) -> float:
        """Probability that two distinct multisets collide, 1 / (p - 1)."""
        return 1.0 / self.group_order


# =============================================================================
# Presets
# =============================================================================

BLS12_381_SCALAR_PARAMS = FieldParams(
    name="bls12-381-scalar",
    modulus=0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001,
)

BN254_SCALAR_PARAMS = FieldParams(
    name="bn254-scalar",
    modulus=0x30644E72E131A029B85045B68181585D2833E84879B9709143E1F593F0000001,
)

# p = 2^64 - 2^32 + 1
GOLDILOCKS_PARAMS = FieldParams(
    name="goldilocks",
    modulus=(1 << 64) - (1 << 32) + 1,
)
