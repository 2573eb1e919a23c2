"""
Schemas
File: proof.py

Purpose: Membership proof for a single leaf of an incremental Merkle tree.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MerkleProof(BaseModel):
    """
    Inclusion proof for one leaf.

    At every level the proof carries the other ``arity - 1`` members of the
    path node's sibling group, in ascending positional order, and the
    position of the path node inside that group.

    Shapes are deliberately not validated here: verification is a total
    predicate and must be able to receive (and reject) malformed proofs.

    ``frozen`` only stops field reassignment. ``siblings`` and
    ``path_indices`` are plain lists that can still be changed in place;
    every proof from ``create_proof`` owns fresh lists, so this never
    reaches the tree. Use ``model_copy(deep=True)`` to hand out a copy
    that the recipient may edit.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_index: int = Field(..., description="Position of the leaf in the tree")
    siblings: list[list[Any]] = Field(
        ...,
        description="Per-level sibling groups, bottom-up, each of length arity - 1",
    )
    path_indices: list[int] = Field(
        ...,
        description="Per-level position of the path node within its group",
    )
    leaf: Any = Field(default=None, description="Leaf value at creation time")
    root: Any = Field(default=None, description="Tree root at creation time")

    @property
    def depth(self) -> int:
        """Number of levels covered by the proof."""
        return len(self.siblings)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict of the proof."""
        return self.model_dump(mode="json")
