"""
Incremental Merkle Tree
Arbitrary-arity Merkle accumulator with incremental insert/update/delete
and membership proofs.

This module provides:
- IncrementalMerkleTree: the mutable tree
- compute_proof_root: fold a leaf through a proof's sibling groups
- verify_merkle_proof: standalone verification against the proof's own root

Storage Rules:
1. nodes[0] holds the leaves; nodes[l] holds the computed prefix of level l
2. Any position past a level's prefix is implicitly zeroes[l]
3. zeroes[0] = zero_value, zeroes[l] = hash([zeroes[l-1]] * arity)
4. nodes[depth] always holds exactly one entry: the root
5. Deleting a leaf overwrites it with zeroes[0]; indices never shift

Concurrency Notes:
- Not thread-safe. A mutation touches every level; callers sharing a tree
  across threads must serialize writers (readers may run concurrently
  with each other but not with a writer).
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from imt.schemas.errors import CapacityError, ConfigurationError, NotFoundError
from imt.schemas.proof import MerkleProof


logger = logging.getLogger(__name__)

HashFn = Callable[[Sequence[Any]], Any]


def _require_int(value: Any, name: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"Parameter '{name}' is none of these types: int",
            parameter=name,
        )
    if value < minimum:
        raise ConfigurationError(
            f"Parameter '{name}' must be at least {minimum}, got {value}",
            parameter=name,
        )


class IncrementalMerkleTree:
    """
    Incremental Merkle tree of fixed depth and arity.

    The tree holds up to ``arity ** depth`` leaves. Unfilled subtrees are
    represented by per-level zero digests, so memory grows with the number
    of leaves rather than with capacity.

    Example:
        >>> from imt.crypto import sha256_field_hash
        >>> tree = IncrementalMerkleTree(sha256_field_hash, depth=16, zero_value=0)
        >>> tree.insert(1)
        >>> proof = tree.create_proof(0)
        >>> tree.verify_proof(proof)
        True
    """

    def __init__(
        self,
        hash_fn: HashFn,
        depth: int,
        zero_value: Any,
        arity: int = 2,
        leaves: Sequence[Any] | None = None,
    ) -> None:
        """
        Args:
            hash_fn: Pure function mapping ``arity`` values to one digest
            depth: Number of levels between leaves and root (>= 1)
            zero_value: Value of an empty leaf
            arity: Children per node (>= 2)
            leaves: Optional initial leaves, built in a single pass

        Raises:
            ConfigurationError: On any invalid argument; no tree is produced
        """
        if hash_fn is None:
            raise ConfigurationError("Parameter 'hash' is not defined", parameter="hash")
        if not callable(hash_fn):
            raise ConfigurationError(
                "Parameter 'hash' is none of these types: function",
                parameter="hash",
            )
        _require_int(depth, "depth", 1)
        _require_int(arity, "arity", 2)
        if leaves is not None and not isinstance(leaves, (list, tuple)):
            raise ConfigurationError(
                "Parameter 'leaves' is none of these types: sequence",
                parameter="leaves",
            )

        capacity = arity ** depth
        if leaves is not None and len(leaves) > capacity:
            raise ConfigurationError(
                f"The tree cannot contain more than {capacity} leaves",
                parameter="leaves",
                details={"capacity": capacity, "leaves": len(leaves)},
            )

        self._hash = hash_fn
        self._depth = depth
        self._arity = arity
        self._capacity = capacity
        self._zeroes: list[Any] = []
        self._nodes: list[list[Any]] = []

        zero = zero_value
        for _ in range(depth):
            self._zeroes.append(zero)
            self._nodes.append([])
            zero = hash_fn([zero] * arity)

        # Root of the empty tree
        self._nodes.append([zero])

        if leaves:
            self._build(leaves)

        logger.debug(
            f"Created tree depth={depth} arity={arity} leaves={self.size}"
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def arity(self) -> int:
        return self._arity

    @property
    def capacity(self) -> int:
        """Maximum number of leaves: ``arity ** depth``."""
        return self._capacity

    @property
    def hash_fn(self) -> HashFn:
        return self._hash

    @property
    def root(self) -> Any:
        return self._nodes[self._depth][0]

    @property
    def leaves(self) -> list[Any]:
        """Copy of the current leaves, including zero-filled deleted slots."""
        return list(self._nodes[0])

    @property
    def zeroes(self) -> list[Any]:
        """Copy of the per-level zero digests (``len == depth``)."""
        return list(self._zeroes)

    @property
    def size(self) -> int:
        return len(self._nodes[0])

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(depth={self._depth}, arity={self._arity}, "
            f"size={self.size})"
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _group(self, level: int, start: int) -> list[Any]:
        """The ``arity`` level-``level`` values starting at ``start``, zero-padded."""
        nodes = self._nodes[level]
        zero = self._zeroes[level]
        end = start + self._arity
        return [nodes[i] if i < len(nodes) else zero for i in range(start, end)]

    def _build(self, leaves: Sequence[Any]) -> None:
        """Bottom-up batch construction, one hash per parent."""
        self._nodes[0] = list(leaves)

        for level in range(self._depth):
            width = len(self._nodes[level])
            self._nodes[level + 1] = [
                self._hash(self._group(level, start))
                for start in range(0, width, self._arity)
            ]

        logger.debug(f"Batch-built {len(leaves)} leaves")

    def _update_path(self, index: int, leaf: Any) -> None:
        """
        Set leaf ``index`` and recompute its ancestors up to the root.

        Every digest is computed before anything is stored, so a leaf the
        hash rejects leaves the tree untouched.
        """
        path = []
        node = leaf
        position = index
        for level in range(self._depth):
            start = position - position % self._arity
            group = self._group(level, start)
            group[position - start] = node
            node = self._hash(group)
            position //= self._arity
            path.append(node)

        leaves = self._nodes[0]
        if index < len(leaves):
            leaves[index] = leaf
        else:
            leaves.append(leaf)

        position = index
        for level, node in enumerate(path, start=1):
            position //= self._arity
            parents = self._nodes[level]
            if position < len(parents):
                parents[position] = node
            else:
                parents.append(node)

    def _require_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise NotFoundError(leaf_index=None, details={"index": repr(index)})
        if index < 0 or index >= self.size:
            raise NotFoundError(leaf_index=index)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, leaf: Any) -> None:
        """
        Append a leaf and update the root.

        Raises:
            CapacityError: If the tree already holds ``arity ** depth`` leaves
            TypeError, ValueError: If the hash rejects the leaf; the tree is unchanged
        """
        if self.size >= self._capacity:
            raise CapacityError(capacity=self._capacity)

        index = self.size
        self._update_path(index, leaf)

        logger.debug(f"Inserted leaf at index {index}")

    def insert_many(self, leaves: Sequence[Any]) -> None:
        """
        Append several leaves in order.

        Capacity is checked for the whole batch first, so an oversized
        batch inserts nothing. Leaves are then inserted one at a time;
        if the hash rejects one, the leaves before it stay inserted.

        Raises:
            CapacityError: If the batch does not fit
            TypeError, ValueError: If the hash rejects a leaf
        """
        if self.size + len(leaves) > self._capacity:
            raise CapacityError(
                f"The tree cannot hold {len(leaves)} more leaves",
                capacity=self._capacity,
                details={"size": self.size, "requested": len(leaves)},
            )

        for leaf in leaves:
            self._update_path(self.size, leaf)

    def update(self, index: int, leaf: Any) -> None:
        """
        Replace the leaf at ``index`` and update the root.

        Raises:
            NotFoundError: If ``index`` is not in ``[0, size)``
            TypeError, ValueError: If the hash rejects the leaf; the tree is unchanged
        """
        self._require_index(index)

        self._update_path(index, leaf)

        logger.debug(f"Updated leaf at index {index}")

    def delete(self, index: int) -> None:
        """
        Clear the leaf at ``index`` by overwriting it with the zero value.

        The slot stays occupied: size and the indices of other leaves
        do not change.

        Raises:
            NotFoundError: If ``index`` is not in ``[0, size)``
        """
        self.update(index, self._zeroes[0])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def index_of(self, leaf: Any) -> int:
        """Index of the first leaf equal to ``leaf``, or -1 if there is none."""
        for index, value in enumerate(self._nodes[0]):
            if value == leaf:
                return index
        return -1

    def create_proof(self, index: int) -> MerkleProof:
        """
        Build a membership proof for the leaf at ``index``.

        Raises:
            NotFoundError: If ``index`` is not in ``[0, size)``
        """
        self._require_index(index)

        siblings: list[list[Any]] = []
        path_indices: list[int] = []

        position = index
        for level in range(self._depth):
            offset = position % self._arity
            group = self._group(level, position - offset)

            path_indices.append(offset)
            siblings.append(group[:offset] + group[offset + 1:])

            position //= self._arity

        logger.debug(f"Created proof for leaf {index}")

        return MerkleProof(
            leaf_index=index,
            siblings=siblings,
            path_indices=path_indices,
            leaf=self._nodes[0][index],
            root=self.root,
        )

    def verify_proof(self, proof: MerkleProof) -> bool:
        """
        Check a proof against this tree's current leaves and root.

        The leaf value is taken from the tree, not from the proof.
        Malformed proofs yield False; this never raises.
        """
        if not isinstance(proof, MerkleProof):
            return False
        if not 0 <= proof.leaf_index < self.size:
            return False
        if not is_well_formed(proof, self._depth, self._arity):
            return False

        leaf = self._nodes[0][proof.leaf_index]
        computed = compute_proof_root(leaf, proof, self._hash)
        return computed is not None and computed == self.root


def is_well_formed(proof: MerkleProof, depth: int, arity: int) -> bool:
    """Whether the proof has ``depth`` levels of ``arity - 1`` siblings and in-range positions."""
    if len(proof.siblings) != depth or len(proof.path_indices) != depth:
        return False
    for group, position in zip(proof.siblings, proof.path_indices):
        if len(group) != arity - 1:
            return False
        if not 0 <= position < arity:
            return False
    return True


def compute_proof_root(leaf: Any, proof: MerkleProof, hash_fn: HashFn) -> Any:
    """
    Fold ``leaf`` through the proof's sibling groups, bottom-up.

    The proof must already be well formed. Returns None when the hash
    rejects a value carried by the proof.
    """
    node = leaf
    for group, position in zip(proof.siblings, proof.path_indices):
        children = list(group)
        children.insert(position, node)
        try:
            node = hash_fn(children)
        except (TypeError, ValueError) as e:
            logger.debug(f"Proof for leaf {proof.leaf_index} rejected by hash: {e}")
            return None
    return node


def verify_merkle_proof(
    proof: MerkleProof,
    hash_fn: HashFn,
    depth: int | None = None,
    arity: int | None = None,
) -> bool:
    """
    Verify a proof without a tree, against the proof's own leaf and root.

    Args:
        proof: Proof carrying ``leaf`` and ``root``
        hash_fn: Same hash the tree was built with
        depth: Expected depth (defaults to the proof's own depth)
        arity: Expected arity (defaults to the first sibling group's size + 1)

    Returns:
        True if the recomputed root equals ``proof.root``
    """
    if not isinstance(proof, MerkleProof) or proof.root is None:
        return False
    if not proof.siblings:
        return False

    if depth is None:
        depth = len(proof.siblings)
    if arity is None:
        arity = len(proof.siblings[0]) + 1
    if arity < 2 or proof.leaf_index < 0 or proof.leaf_index >= arity ** depth:
        return False
    if not is_well_formed(proof, depth, arity):
        return False

    computed = compute_proof_root(proof.leaf, proof, hash_fn)
    return computed is not None and computed == proof.root


__all__ = [
    "IncrementalMerkleTree",
    "compute_proof_root",
    "is_well_formed",
    "verify_merkle_proof",
]
