"""
msethash: Multiset Homomorphic Hashing

A constant-size commitment to a signed multiset, computed in the
multiplicative group of a prime field:

    h(M) = prod_e phi(e)^(m_e)

Union and difference of multisets map to multiplication and division
of their hashes, so both can be computed without the multisets.

Usage:
    from msethash import MultisetHash

    a = MultisetHash.new().add_elem("apple", 2).add_elem("pear", 1)
    b = MultisetHash.new().add_elem("pear", 1)

    assert a - b == MultisetHash.new().add_elem("apple", 2)
    assert a + b == MultisetHash.new().add_elem("apple", 2).add_elem("pear", 2)

    # Other fields
    from msethash import GOLDILOCKS
    h = MultisetHash.new(GOLDILOCKS).add(GOLDILOCKS.element(7), 3)
"""

import logging

# Parameters
from .params import (
    FieldParams,
    BLS12_381_SCALAR_PARAMS,
    BN254_SCALAR_PARAMS,
    GOLDILOCKS_PARAMS,
)

# Field arithmetic
from .field import (
    Field,
    FieldElement,
    PrimeField,
    batch_invert,
    BLS12_381_SCALAR,
    BN254_SCALAR,
    GOLDILOCKS,
    DEFAULT_FIELD,
)

# Hashing to the field
from .tags import ValueTag, DEFAULT_DST
from .hash_to_field import (
    HashToField,
    DomainToField,
    Expander,
    FieldHasher,
    encode_value,
    expand_message_xmd,
    expand_message_blake3,
    default_hasher,
    hash_to_field,
)

# Errors
from .errors import MultisetHashError, InvalidElementError, DegenerateOperationWarning

# Main API
from .multiset import MultisetHash

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Parameters
    "FieldParams",
    "BLS12_381_SCALAR_PARAMS",
    "BN254_SCALAR_PARAMS",
    "GOLDILOCKS_PARAMS",
    # Field
    "Field",
    "FieldElement",
    "PrimeField",
    "batch_invert",
    "BLS12_381_SCALAR",
    "BN254_SCALAR",
    "GOLDILOCKS",
    "DEFAULT_FIELD",
    # Hash to field
    "ValueTag",
    "DEFAULT_DST",
    "HashToField",
    "DomainToField",
    "Expander",
    "FieldHasher",
    "encode_value",
    "expand_message_xmd",
    "expand_message_blake3",
    "default_hasher",
    "hash_to_field",
    # Errors
    "MultisetHashError",
    "InvalidElementError",
    "DegenerateOperationWarning",
    # Main API
    "MultisetHash",
]
