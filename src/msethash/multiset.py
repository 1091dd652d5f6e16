"""
Multiset Homomorphic Hash

A MultisetHash commits to a signed multiset M over a domain as a single
field element:

    h(M) = prod_{e} phi(e)^(m_e)

where phi maps domain values into the field and m_e is the (possibly
negative) multiplicity of e. Because the map is a group homomorphism
from (Z^domain, +) into (F_p*, *):

    h(A + B) = h(A) * h(B)        (multiset_union)
    h(A - B) = h(A) * h(B)^-1     (multiset_difference)

Multiplicities are never stored. The hash is a commitment, not a codec.

Values are immutable: every operation returns a new MultisetHash and
leaves the receiver untouched, including when it raises.
"""

from __future__ import annotations
from typing import Any, Iterable, Optional, Tuple
import logging
import warnings

from .errors import InvalidElementError, DegenerateOperationWarning
from .field import DEFAULT_FIELD, FieldElement, PrimeField, batch_invert
from .hash_to_field import DomainToField, hash_to_field

logger = logging.getLogger(__name__)

MAX_COUNT = (1 << 64) - 1


def _check_count(count: int) -> int:
    """Counts are unsigned 64-bit integers."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"count must be an int, got {type(count).__name__}")
    if not 0 <= count <= MAX_COUNT:
        raise ValueError(f"count must be in [0, 2^64), got {count}")
    return count


class MultisetHash:
    """
    Hash of a signed multiset of field elements.

    Example:
        >>> h = MultisetHash.new().add_elem("apple", 3).remove_elem("apple", 1)
        >>> assert h == MultisetHash.new().add_elem("apple", 2)
    """

    __slots__ = ('_field', '_value')

    def __init__(self, value: FieldElement, field: Optional[PrimeField] = None):
        if field is None:
            field = value.field if isinstance(value, FieldElement) else DEFAULT_FIELD
        self._field = field
        self._value = field.check(value)

    def __setattr__(self, name, value):
        if hasattr(self, '_value'):
            raise AttributeError("MultisetHash is immutable")
        object.__setattr__(self, name, value)

    @property
    def field(self) -> PrimeField:
        return self._field

    @property
    def value(self) -> FieldElement:
        """The accumulated field element."""
        return self._value

    def _with(self, value: FieldElement) -> MultisetHash:
        return MultisetHash(value, self._field)

    def _same_field(self, other: MultisetHash) -> MultisetHash:
        if not isinstance(other, MultisetHash):
            raise TypeError(f"Expected MultisetHash, got {type(other).__name__}")
        if other._field != self._field:
            raise ValueError(
                f"Cannot combine hashes over {self._field.name} and {other._field.name}"
            )
        return other

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls, field: PrimeField = DEFAULT_FIELD) -> MultisetHash:
        """Hash of the empty multiset: the field's multiplicative identity."""
        return cls(field.identity(), field)

    @classmethod
    def from_counts(
        cls,
        pairs: Iterable[Tuple[FieldElement, int]],
        field: PrimeField = DEFAULT_FIELD,
    ) -> MultisetHash:
        """Hash of the multiset given as (element, count) pairs."""
        return cls.new(field).add_many(pairs)

    @classmethod
    def from_bytes(cls, data: bytes, field: PrimeField = DEFAULT_FIELD) -> MultisetHash:
        """Decode the raw canonical encoding produced by to_bytes."""
        return cls(field.from_bytes(data), field)

    def to_bytes(self) -> bytes:
        return self._field.to_bytes(self._value)

    # =========================================================================
    # Incremental Update
    # =========================================================================

    def add(self, elem: FieldElement, count: int) -> MultisetHash:
        """Hash after adding `count` copies of `elem`."""
        term = self._field.pow(elem, _check_count(count))
        return self._with(self._field.multiply(self._value, term))

    def remove(self, elem: FieldElement, count: int) -> MultisetHash:
        """
        Hash after removing `count` copies of `elem`.

        Multiplicities may go negative. Raises InvalidElementError if
        `elem` is zero, whatever the count.
        """
        count = _check_count(count)
        inv = self._field.invert(elem)
        if inv is None:
            logger.debug("remove rejected zero element of %s", self._field.name)
            raise InvalidElementError("remove")
        term = self._field.pow(inv, count)
        return self._with(self._field.multiply(self._value, term))

    def add_elem(self, value: Any, count: int, mapper: Optional[DomainToField] = None) -> MultisetHash:
        """Same as add, after hashing `value` to the field."""
        return self.add(hash_to_field(value, self._field, mapper), count)

    def remove_elem(self, value: Any, count: int, mapper: Optional[DomainToField] = None) -> MultisetHash:
        """Same as remove, after hashing `value` to the field."""
        return self.remove(hash_to_field(value, self._field, mapper), count)

    def add_many(self, pairs: Iterable[Tuple[FieldElement, int]]) -> MultisetHash:
        acc = self._value
        for elem, count in pairs:
            acc = self._field.multiply(acc, self._field.pow(elem, _check_count(count)))
        return self._with(acc)

    def remove_many(self, pairs: Iterable[Tuple[FieldElement, int]]) -> MultisetHash:
        """
        Remove several (element, count) pairs with a single field inversion.

        Fails as a whole if any element is zero.
        """
        pairs = [(self._field.check(elem), _check_count(count)) for elem, count in pairs]
        inverses = batch_invert([elem for elem, _ in pairs])
        if inverses is None:
            logger.debug("remove_many rejected zero element of %s", self._field.name)
            raise InvalidElementError("remove_many")
        acc = self._value
        for inv, (_, count) in zip(inverses, pairs):
            acc = self._field.multiply(acc, self._field.pow(inv, count))
        return self._with(acc)

    # =========================================================================
    # Derived Set Operations
    # =========================================================================

    def multiset_union(self, other: MultisetHash) -> MultisetHash:
        """
        Hash of the multiset union, where multiplicities add.
        """
        other = self._same_field(other)
        return self._with(self._field.multiply(self._value, other._value))

    def multiset_difference(self, other: MultisetHash) -> MultisetHash:
        """
        Hash of the multiset difference, where multiplicities subtract.

        Elements more frequent in `other` end up with negative multiplicity.
        """
        other = self._same_field(other)
        inv = self._field.invert(other._value)
        if inv is None:
            logger.debug("multiset_difference rejected zero hash over %s", self._field.name)
            raise InvalidElementError("multiset_difference", "hash of `other` must be nonzero")
        return self._with(self._field.multiply(self._value, inv))

    def set_intersection(self, other: MultisetHash) -> MultisetHash:
        """
        A - (A - B), kept for compatibility.

        This is NOT an intersection. In the group the formula reduces to
        h_A * (h_A * h_B^-1)^-1 = h_B, so it always returns `other`.
        Element-wise minimum is not expressible with group operations on
        opaque hashes.
        """
        warnings.warn(
            "set_intersection always returns the hash of `other`; "
            "multiset intersection cannot be computed from hashes",
            DegenerateOperationWarning,
            stacklevel=2,
        )
        return self.multiset_difference(self.multiset_difference(other))

    def set_symmetric_difference(self, other: MultisetHash) -> MultisetHash:
        """
        (A - B) + (B - A), kept for compatibility.

        This is NOT a symmetric difference. The signed multiplicities
        telescope, (m_A - m_B) + (m_B - m_A) = 0, so the result is always
        the empty-multiset hash.
        """
        warnings.warn(
            "set_symmetric_difference always returns the empty-multiset hash",
            DegenerateOperationWarning,
            stacklevel=2,
        )
        other = self._same_field(other)
        return self.multiset_difference(other).multiset_union(other.multiset_difference(self))

    def __add__(self, other: MultisetHash) -> MultisetHash:
        if not isinstance(other, MultisetHash):
            return NotImplemented
        return self.multiset_union(other)

    def __sub__(self, other: MultisetHash) -> MultisetHash:
        if not isinstance(other, MultisetHash):
            return NotImplemented
        return self.multiset_difference(other)

    # =========================================================================
    # Comparison
    # =========================================================================

    def is_identity(self) -> bool:
        """True if this equals the empty-multiset hash."""
        return self._value == self._field.identity()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MultisetHash):
            return self._field == other._field and self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._field, self._value.value))

    def __repr__(self) -> str:
        return f"MultisetHash({self._field.name}, 0x{self._value.value:x})"
