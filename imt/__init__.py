"""
Incremental Merkle Tree.

Public entry points are re-exported here; see imt.merkle for details.
"""
from imt.crypto.hashing import (
    FIELD_MODULUS,
    blake2s_field_hash,
    field,
    get_hash_function,
    sha256_field_hash,
)
from imt.merkle import (
    IncrementalMerkleTree,
    IncrementalQuinTree,
    MerkleProof,
    verify_merkle_proof,
)
from imt.schemas.errors import (
    CapacityError,
    ConfigurationError,
    IMTException,
    NotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "IncrementalMerkleTree",
    "IncrementalQuinTree",
    "MerkleProof",
    "verify_merkle_proof",
    "FIELD_MODULUS",
    "field",
    "sha256_field_hash",
    "blake2s_field_hash",
    "get_hash_function",
    "IMTException",
    "ConfigurationError",
    "CapacityError",
    "NotFoundError",
]
