"""
Incremental Merkle Tree
Mutable arbitrary-arity Merkle accumulator with membership proofs.

This module provides:
- IncrementalMerkleTree: insert/update/delete/index_of/create_proof/verify_proof
- MerkleProof: Pydantic model of a membership proof
- verify_merkle_proof: standalone verification of a proof against its own root
- IncrementalQuinTree: slow top-down reference accumulator for cross-checks

Usage:
    from imt.crypto import sha256_field_hash
    from imt.merkle import IncrementalMerkleTree

    tree = IncrementalMerkleTree(sha256_field_hash, depth=16, zero_value=0, arity=5)
    tree.insert(42)
    proof = tree.create_proof(0)
    assert tree.verify_proof(proof)
"""
from imt.schemas.proof import MerkleProof

from .tree import (
    IncrementalMerkleTree,
    compute_proof_root,
    is_well_formed,
    verify_merkle_proof,
)
from .reference import IncrementalQuinTree, MerklePath


__all__ = [
    # Core types
    "IncrementalMerkleTree",
    "MerkleProof",
    # Proof helpers
    "compute_proof_root",
    "is_well_formed",
    "verify_merkle_proof",
    # Reference accumulator
    "IncrementalQuinTree",
    "MerklePath",
]
