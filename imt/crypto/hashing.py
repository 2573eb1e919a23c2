"""
Hash Adapters
Field-element hash functions that can be injected into a tree.

This module provides:
- field(): reduce an integer into the BN254 scalar field
- sha256_field_hash / blake2s_field_hash: fixed-arity hashes over field elements
- get_hash_function(): resolve an adapter by name (used by config and CLI)

The tree treats the hash as an opaque capability: any deterministic
callable taking a sequence of ``arity`` values and returning one value
will do. Zero-knowledge deployments inject Poseidon here; the adapters
below are off-circuit stand-ins built on hashlib.
"""
from __future__ import annotations

import hashlib
from typing import Any, Callable, Sequence

from imt.schemas.errors import ConfigurationError


# BN254 scalar field modulus
FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Width of one encoded field element
ELEMENT_SIZE = 32

HashFunction = Callable[[Sequence[Any]], Any]


def field(value: int) -> int:
    """
    Reduce an integer into the field.

    Args:
        value: Any Python int (negative values wrap around)

    Returns:
        Integer in [0, FIELD_MODULUS)
    """
    return value % FIELD_MODULUS


def encode_element(value: int) -> bytes:
    """
    Encode a field element as 32 big-endian bytes.

    Only canonical elements in [0, FIELD_MODULUS) are accepted; use
    field() first to reduce arbitrary ints.

    Raises:
        TypeError: If value is not an int (bool is rejected too)
        ValueError: If value is outside [0, FIELD_MODULUS)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Field elements must be int, got {type(value).__name__}")
    if not 0 <= value < FIELD_MODULUS:
        raise ValueError(f"Value is not a canonical field element: {value}")
    return value.to_bytes(ELEMENT_SIZE, byteorder="big", signed=False)


def _digest_to_field(digest: bytes) -> int:
    return int.from_bytes(digest, byteorder="big") % FIELD_MODULUS


def sha256_field_hash(values: Sequence[int]) -> int:
    """
    Hash a group of field elements with SHA-256.

    Each element is encoded as 32 fixed-width bytes so that the
    digest is unambiguous for every arity.

    Example:
        >>> sha256_field_hash([0, 0]) == sha256_field_hash((0, 0))
        True
    """
    h = hashlib.sha256()
    for v in values:
        h.update(encode_element(v))
    return _digest_to_field(h.digest())


def blake2s_field_hash(values: Sequence[int]) -> int:
    """Hash a group of field elements with BLAKE2s (32-byte digest)."""
    h = hashlib.blake2s(digest_size=ELEMENT_SIZE)
    for v in values:
        h.update(encode_element(v))
    return _digest_to_field(h.digest())


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "sha256": sha256_field_hash,
    "blake2s": blake2s_field_hash,
}


def get_hash_function(name: str) -> HashFunction:
    """
    Resolve a hash adapter by name.

    Raises:
        ConfigurationError: If the name is unknown
    """
    try:
        return HASH_FUNCTIONS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown hash function '{name}', expected one of: "
            f"{', '.join(sorted(HASH_FUNCTIONS))}",
            parameter="hash",
        ) from None


__all__ = [
    "FIELD_MODULUS",
    "ELEMENT_SIZE",
    "HashFunction",
    "HASH_FUNCTIONS",
    "field",
    "encode_element",
    "sha256_field_hash",
    "blake2s_field_hash",
    "get_hash_function",
]
