"""
Hash adapters for tree construction.
"""
from .hashing import (
    FIELD_MODULUS,
    HASH_FUNCTIONS,
    HashFunction,
    blake2s_field_hash,
    encode_element,
    field,
    get_hash_function,
    sha256_field_hash,
)

__all__ = [
    "FIELD_MODULUS",
    "HASH_FUNCTIONS",
    "HashFunction",
    "field",
    "encode_element",
    "sha256_field_hash",
    "blake2s_field_hash",
    "get_hash_function",
]
