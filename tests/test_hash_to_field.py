"""
Tests for value encoding, message expansion and hashing to the field.
"""

import pytest

from msethash import (
    FieldParams,
    PrimeField,
    Expander,
    FieldHasher,
    DomainToField,
    HashToField,
    encode_value,
    expand_message_xmd,
    expand_message_blake3,
    default_hasher,
    hash_to_field,
    BLS12_381_SCALAR,
    GOLDILOCKS,
    DEFAULT_DST,
)


class TestEncodeValue:
    """Encoding must be injective across types."""

    def test_types_do_not_collide(self):
        encodings = {
            encode_value(None),
            encode_value(True),
            encode_value(1),
            encode_value("1"),
            encode_value(b"1"),
            encode_value((1,)),
        }
        assert len(encodings) == 6

    def test_bool_is_not_int(self):
        assert encode_value(True) != encode_value(1)
        assert encode_value(False) != encode_value(0)

    def test_sequence_boundaries(self):
        assert encode_value(("ab", "c")) != encode_value(("a", "bc"))
        assert encode_value(((1,), 2)) != encode_value((1, (2,)))

    def test_list_and_tuple_agree(self):
        assert encode_value([1, "a"]) == encode_value((1, "a"))

    def test_bytes_like_agree(self):
        assert encode_value(bytearray(b"xy")) == encode_value(b"xy")
        assert encode_value(memoryview(b"xy")) == encode_value(b"xy")

    @pytest.mark.parametrize("a,b", [(0, -1), (127, 128), (-128, 128), (255, -1)])
    def test_ints_distinct(self, a, b):
        assert encode_value(a) != encode_value(b)

    def test_big_ints(self):
        assert encode_value(2**300) != encode_value(2**300 + 1)

    def test_unsupported(self):
        with pytest.raises(TypeError):
            encode_value(1.5)
        with pytest.raises(TypeError):
            encode_value({"a": 1})


class TestExpandMessage:

    def test_rfc9380_vectors(self):
        dst = b"QUUX-V01-CS02-with-expander-SHA256-128"
        assert expand_message_xmd(b"", dst, 0x20).hex() == (
            "68a985b87eb6b46952128911f2a4412bbc302a9d759667f87f7a21d803f07235"
        )
        assert expand_message_xmd(b"abc", dst, 0x20).hex() == (
            "d8ccab23b5985ccea865c6c97b6e5b8350e794e603b4b97902f53a8a0d605615"
        )

    @pytest.mark.parametrize("length", [1, 31, 32, 48, 100, 255])
    def test_xmd_length(self, length):
        assert len(expand_message_xmd(b"msg", DEFAULT_DST, length)) == length
        assert len(expand_message_xmd(b"msg", DEFAULT_DST, length, 'sha512')) == length

    @pytest.mark.parametrize("length", [1, 32, 48, 100, 1000])
    def test_blake3_length(self, length):
        assert len(expand_message_blake3(b"msg", DEFAULT_DST, length)) == length

    def test_dst_separates(self):
        assert expand_message_xmd(b"msg", b"A", 32) != expand_message_xmd(b"msg", b"B", 32)
        assert expand_message_blake3(b"msg", b"A", 32) != expand_message_blake3(b"msg", b"B", 32)

    def test_xmd_limits(self):
        with pytest.raises(ValueError):
            expand_message_xmd(b"msg", DEFAULT_DST, 255 * 32 + 1)
        with pytest.raises(ValueError):
            expand_message_xmd(b"msg", bytes(256), 32)

    def test_blake3_limits(self):
        with pytest.raises(ValueError):
            expand_message_blake3(b"msg", DEFAULT_DST, 65536)


class TestFieldHasher:

    @pytest.mark.parametrize("expander", list(Expander))
    def test_deterministic_nonzero(self, expander):
        hasher = FieldHasher(BLS12_381_SCALAR, expander=expander)
        for value in ["alice", b"bob", 42, ("x", 1)]:
            e = hasher.map(value)
            assert e == hasher.map(value)
            assert not e.is_zero()
            assert e.field == BLS12_381_SCALAR

    def test_expanders_differ(self):
        values = {FieldHasher(expander=x).map("alice") for x in Expander}
        assert len(values) == len(Expander)

    def test_expander_by_value(self):
        assert FieldHasher(expander='xof:blake3').expander is Expander.BLAKE3

    def test_dst_separates(self):
        assert FieldHasher(dst=b"app-1").map("v") != FieldHasher(dst=b"app-2").map("v")

    def test_bad_dst(self):
        with pytest.raises(ValueError):
            FieldHasher(dst=bytes(256))

    def test_fields_separate(self):
        assert FieldHasher(GOLDILOCKS).map("v").field == GOLDILOCKS

    def test_never_zero_in_tiny_field(self):
        # Half of all raw outputs reduce to zero mod 2
        tiny = PrimeField(FieldParams("two", 2))
        hasher = FieldHasher(tiny)
        for i in range(64):
            assert hasher.map(i).is_one()

    def test_is_domain_to_field(self):
        assert isinstance(FieldHasher(), DomainToField)


class TestHashToField:

    def test_default_hasher_cached(self):
        assert default_hasher(GOLDILOCKS) is default_hasher(GOLDILOCKS)

    def test_uses_default_hasher(self):
        assert hash_to_field("v") == default_hasher(BLS12_381_SCALAR).map("v")
        assert hash_to_field("v", GOLDILOCKS) == default_hasher(GOLDILOCKS).map("v")

    def test_self_mapping(self):
        class Point:
            def hash_to_field(self, field):
                return field.element(17)

        assert isinstance(Point(), HashToField)
        assert hash_to_field(Point(), GOLDILOCKS) == GOLDILOCKS.element(17)

    def test_mapper_field_checked(self):
        with pytest.raises(ValueError):
            hash_to_field("v", GOLDILOCKS, mapper=FieldHasher(BLS12_381_SCALAR))
