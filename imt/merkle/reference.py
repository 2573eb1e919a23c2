"""
Reference accumulator.

A deliberately naive quin-tree kept alongside the incremental tree to
cross-check it: it stores only the raw leaves and recomputes every digest
top-down on demand. Slow, but simple enough to trust.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence


@dataclass(frozen=True)
class MerklePath:
    """Path from one leaf to the root as produced by gen_merkle_path()."""
    path_elements: list[list[Any]]
    indices: list[int]
    root: Any


class IncrementalQuinTree:
    """
    Naive arity-N Merkle tree over a plain list of leaves.

    Digests are recomputed from the leaves on every query, so ``root``
    and ``gen_merkle_path`` cost a full tree walk.

    Raises:
        ValueError: If depth < 1 or arity < 2
    """

    def __init__(
        self,
        depth: int,
        zero_value: Any,
        arity: int,
        hash_fn: Callable[[Sequence[Any]], Any],
    ) -> None:
        if depth < 1:
            raise ValueError(f"Depth must be at least 1, got {depth}")
        if arity < 2:
            raise ValueError(f"Arity must be at least 2, got {arity}")
        self.depth = depth
        self.arity = arity
        self.hash_fn = hash_fn
        self.leaves: list[Any] = []

        # zeros[depth] is the root of an empty tree
        self.zeros = [zero_value]
        for _ in range(depth):
            self.zeros.append(hash_fn([self.zeros[-1]] * arity))

    def insert(self, leaf: Any) -> None:
        if len(self.leaves) >= self.arity ** self.depth:
            raise ValueError("Tree is full")
        self.leaves.append(leaf)

    def update(self, index: int, leaf: Any) -> None:
        if not 0 <= index < len(self.leaves):
            raise IndexError(f"No leaf at index {index}")
        self.leaves[index] = leaf

    def node(self, level: int, index: int) -> Any:
        # Subtree covers leaves [index * arity**level, (index + 1) * arity**level)
        if index * self.arity ** level >= len(self.leaves):
            return self.zeros[level]
        if level == 0:
            return self.leaves[index]
        first = index * self.arity
        return self.hash_fn(
            [self.node(level - 1, first + i) for i in range(self.arity)]
        )

    @property
    def root(self) -> Any:
        return self.node(self.depth, 0)

    def gen_merkle_path(self, index: int) -> MerklePath:
        if not 0 <= index < self.arity ** self.depth:
            raise IndexError(f"Index {index} out of range")

        path_elements = []
        indices = []
        position = index
        for level in range(self.depth):
            offset = position % self.arity
            start = position - offset
            indices.append(offset)
            path_elements.append([
                self.node(level, i)
                for i in range(start, start + self.arity)
                if i != position
            ])
            position //= self.arity

        return MerklePath(path_elements=path_elements, indices=indices, root=self.root)
