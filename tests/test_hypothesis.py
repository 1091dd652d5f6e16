"""
Property-Based Testing with Hypothesis

The multiset hash is a homomorphism from signed multisets into the
field's multiplicative group. These tests check the group laws on
randomly generated multisets rather than hand-picked ones.
"""

from collections import Counter

import pytest

from hypothesis import given, strategies as st, settings
from hypothesis.strategies import composite

from msethash import (
    MultisetHash,
    InvalidElementError,
    FieldHasher,
    GOLDILOCKS,
    BLS12_381_SCALAR,
)


FIELD = GOLDILOCKS
P = FIELD.modulus

counts = st.integers(min_value=0, max_value=2**64 - 1)
half_counts = st.integers(min_value=0, max_value=2**63 - 1)
small_counts = st.integers(min_value=0, max_value=50)


# =============================================================================
# STRATEGIES
# =============================================================================

@composite
def nonzero_elements(draw):
    return FIELD.element(draw(st.integers(min_value=1, max_value=P - 1)))


@composite
def multisets(draw, max_size=8):
    """(element, count) pairs over a small pool, so elements repeat."""
    pool = draw(st.lists(nonzero_elements(), min_size=1, max_size=5))
    return draw(st.lists(
        st.tuples(st.sampled_from(pool), small_counts),
        max_size=max_size,
    ))


def build(pairs):
    return MultisetHash.from_counts(pairs, FIELD)


def signed_hash(multiplicities):
    """Hash built from net signed multiplicities."""
    h = MultisetHash.new(FIELD)
    for elem, m in multiplicities.items():
        h = h.add(elem, m) if m >= 0 else h.remove(elem, -m)
    return h


# =============================================================================
# PROPERTIES
# =============================================================================

class TestIdentity:

    @given(elem=nonzero_elements(), count=counts)
    @settings(max_examples=200)
    def test_add_then_remove(self, elem, count):
        assert MultisetHash.new(FIELD).add(elem, count).remove(elem, count) == MultisetHash.new(FIELD)

    @given(count=counts)
    def test_remove_zero_always_fails(self, count):
        with pytest.raises(InvalidElementError):
            MultisetHash.new(FIELD).remove(FIELD.zero(), count)


class TestAdd:

    @given(pairs=multisets(), seed=st.randoms())
    @settings(max_examples=200)
    def test_order_independent(self, pairs, seed):
        shuffled = list(pairs)
        seed.shuffle(shuffled)
        assert build(pairs) == build(shuffled)

    @given(elem=nonzero_elements(), a=half_counts, b=half_counts)
    def test_additive(self, elem, a, b):
        h = MultisetHash.new(FIELD)
        assert h.add(elem, a).add(elem, b) == h.add(elem, a + b)


class TestHomomorphism:

    @given(a=multisets(), b=multisets())
    @settings(max_examples=200)
    def test_union(self, a, b):
        assert build(a).multiset_union(build(b)) == build(a + b)

    @given(a=multisets(), b=multisets())
    @settings(max_examples=200)
    def test_difference(self, a, b):
        expected = build(a).remove_many(b)
        assert build(a).multiset_difference(build(b)) == expected

    @given(a=multisets(), b=multisets())
    @settings(max_examples=200)
    def test_difference_nets_multiplicities(self, a, b):
        net = Counter()
        for elem, count in a:
            net[elem] += count
        for elem, count in b:
            net[elem] -= count
        assert build(a) - build(b) == signed_hash(net)

    @given(a=multisets(), b=multisets())
    def test_union_then_difference(self, a, b):
        assert (build(a) + build(b)) - build(b) == build(a)


class TestDomainValues:

    @given(values=st.lists(st.one_of(st.text(max_size=20), st.binary(max_size=20), st.integers()),
                           max_size=6))
    @settings(max_examples=50)
    def test_add_remove_elem_cancel(self, values):
        h = MultisetHash.new(BLS12_381_SCALAR)
        for v in values:
            h = h.add_elem(v, 2)
        for v in reversed(values):
            h = h.remove_elem(v, 2)
        assert h.is_identity()

    @given(value=st.text(max_size=40))
    @settings(max_examples=100)
    def test_hash_to_field_nonzero(self, value):
        assert not FieldHasher(FIELD).map(value).is_zero()
