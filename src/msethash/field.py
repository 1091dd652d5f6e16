"""
Prime Field Arithmetic

The multiset hash only needs four things from a field:
- the multiplicative identity
- multiplication
- exponentiation by a non-negative integer
- inversion, which fails on zero

The Field protocol names exactly that capability. PrimeField is the
concrete F_p implementation on Python ints, parameterized by FieldParams.
"""

from __future__ import annotations
from typing import List, Optional, Protocol, runtime_checkable
import random

from .params import (
    FieldParams,
    BLS12_381_SCALAR_PARAMS,
    BN254_SCALAR_PARAMS,
    GOLDILOCKS_PARAMS,
)


@runtime_checkable
class Field(Protocol):
    """Field capability consumed by MultisetHash."""

    def identity(self): ...

    def multiply(self, a, b): ...

    def pow(self, a, exponent: int): ...

    def invert(self, a): ...


class FieldElement:
    """
    Element of a prime field F_p.

    Elements carry their field; arithmetic between elements of
    different fields is rejected.
    """

    __slots__ = ('value', 'field')

    def __init__(self, value: int, field: PrimeField):
        self.field = field
        self.value = value % field.modulus

    def _coerce(self, other) -> FieldElement:
        if isinstance(other, FieldElement):
            if other.field != self.field:
                raise ValueError(
                    f"Cannot combine elements of {self.field.name} and {other.field.name}"
                )
            return other
        if isinstance(other, int) and not isinstance(other, bool):
            return FieldElement(other, self.field)
        return NotImplemented

    # =========================================================================
    # Arithmetic Operations
    # =========================================================================

    def __add__(self, other) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(self.value + other.value, self.field)

    def __sub__(self, other) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(self.value - other.value, self.field)

    def __mul__(self, other) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(self.value * other.value, self.field)

    __radd__ = __add__
    __rmul__ = __mul__

    def __neg__(self) -> FieldElement:
        return FieldElement(-self.value, self.field)

    def __truediv__(self, other) -> FieldElement:
        """Division in F_p (multiplication by inverse)."""
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self * other.inverse()

    def __pow__(self, exp: int) -> FieldElement:
        """Exponentiation; negative exponents go through the inverse."""
        if exp < 0:
            return self.inverse() ** (-exp)
        return FieldElement(pow(self.value, exp, self.field.modulus), self.field)

    def invert(self) -> Optional[FieldElement]:
        """Multiplicative inverse, or None for zero."""
        if self.value == 0:
            return None
        return FieldElement(pow(self.value, -1, self.field.modulus), self.field)

    def inverse(self) -> FieldElement:
        """Multiplicative inverse, raising ZeroDivisionError for zero."""
        inv = self.invert()
        if inv is None:
            raise ZeroDivisionError("Cannot invert zero")
        return inv

    # =========================================================================
    # Comparison Operations
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return self.field == other.field and self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == (other % self.field.modulus)
        return False

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash((self.field, self.value))

    def __repr__(self) -> str:
        return f"FieldElement({self.value}, {self.field.name})"

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize to the field's fixed width (little-endian)."""
        return self.value.to_bytes(self.field.byte_length, 'little')

    def to_int(self) -> int:
        return self.value

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_zero(self) -> bool:
        return self.value == 0

    def is_one(self) -> bool:
        return self.value == 1


class PrimeField:
    """
    The field F_p described by a FieldParams.

    Implements the Field protocol. Two PrimeField objects are equal when
    their parameters are equal.
    """

    __slots__ = ('params',)

    def __init__(self, params: FieldParams):
        self.params = params

    @property
    def name(self) -> str:
        return self.params.name

    @property
    def modulus(self) -> int:
        return self.params.modulus

    @property
    def byte_length(self) -> int:
        return self.params.byte_length

    @property
    def group_order(self) -> int:
        return self.params.group_order

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PrimeField):
            return self.params == other.params
        return False

    def __hash__(self) -> int:
        return hash(self.params)

    def __repr__(self) -> str:
        return f"PrimeField({self.name})"

    # =========================================================================
    # Constructors
    # =========================================================================

    def element(self, value: int) -> FieldElement:
        return FieldElement(value, self)

    def zero(self) -> FieldElement:
        """Additive identity."""
        return FieldElement(0, self)

    def one(self) -> FieldElement:
        """Multiplicative identity."""
        return FieldElement(1, self)

    def random(self) -> FieldElement:
        """Random nonzero element. Not for key material."""
        return FieldElement(random.randrange(1, self.modulus), self)

    def from_bytes(self, data: bytes) -> FieldElement:
        """
        Deserialize a canonical little-endian encoding.

        Rejects wrong lengths and values >= p, so that every element
        has exactly one encoding.
        """
        if len(data) != self.byte_length:
            raise ValueError(
                f"Expected {self.byte_length} bytes for {self.name}, got {len(data)}"
            )
        value = int.from_bytes(data, 'little')
        if value >= self.modulus:
            raise ValueError(f"Non-canonical encoding for {self.name}")
        return FieldElement(value, self)

    def to_bytes(self, a: FieldElement) -> bytes:
        return self.check(a).to_bytes()

    def check(self, a) -> FieldElement:
        """Return `a` if it is an element of this field, else raise."""
        if not isinstance(a, FieldElement):
            raise TypeError(f"Expected FieldElement, got {type(a).__name__}")
        if a.field != self:
            raise ValueError(f"Element of {a.field.name} used with {self.name}")
        return a

    # =========================================================================
    # Field Protocol
    # =========================================================================

    def identity(self) -> FieldElement:
        return self.one()

    def multiply(self, a: FieldElement, b: FieldElement) -> FieldElement:
        return self.check(a) * self.check(b)

    def pow(self, a: FieldElement, exponent: int) -> FieldElement:
        if exponent < 0:
            raise ValueError(f"Exponent must be non-negative, got {exponent}")
        return self.check(a) ** exponent

    def invert(self, a: FieldElement) -> Optional[FieldElement]:
        return self.check(a).invert()


# =============================================================================
# Helper Functions
# =============================================================================

def batch_invert(elements: List[FieldElement]) -> Optional[List[FieldElement]]:
    """
    Batch inversion using Montgomery's trick.

    Computes inverses of n elements using 3(n-1) multiplications + 1 inversion.
    Returns None if any element is zero.
    """
    n = len(elements)
    if n == 0:
        return []

    # Forward pass: compute prefix products
    prefix = [elements[0]] * n
    for i in range(1, n):
        prefix[i] = prefix[i-1] * elements[i]

    # Single inversion of the total product; zero iff some element is zero
    inv_total = prefix[-1].invert()
    if inv_total is None:
        return None

    # Backward pass: compute individual inverses
    inverses = [inv_total] * n
    for i in range(n - 1, 0, -1):
        inverses[i] = inv_total * prefix[i-1]
        inv_total = inv_total * elements[i]
    inverses[0] = inv_total

    return inverses


# =============================================================================
# Presets
# =============================================================================

BLS12_381_SCALAR = PrimeField(BLS12_381_SCALAR_PARAMS)
BN254_SCALAR = PrimeField(BN254_SCALAR_PARAMS)
GOLDILOCKS = PrimeField(GOLDILOCKS_PARAMS)

DEFAULT_FIELD = BLS12_381_SCALAR
