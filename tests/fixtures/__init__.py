"""
Test fixtures package for incremental Merkle tree tests.

Usage:
    from fixtures import make_tree, make_reference

    def test_something():
        tree = make_tree(arity=5)
"""

from .trees import (
    DEPTH,
    NUMBER_OF_LEAVES,
    ZERO_VALUE,
    make_tree,
    make_reference,
    make_filled_pair,
)

__all__ = [
    "DEPTH",
    "NUMBER_OF_LEAVES",
    "ZERO_VALUE",
    "make_tree",
    "make_reference",
    "make_filled_pair",
]
