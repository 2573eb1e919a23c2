"""
Pytest configuration and shared fixtures for incremental Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_trees = importlib.import_module("fixtures.trees")

DEPTH = _trees.DEPTH
NUMBER_OF_LEAVES = _trees.NUMBER_OF_LEAVES
make_tree = _trees.make_tree
make_reference = _trees.make_reference
make_filled_pair = _trees.make_filled_pair


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(params=[2, 5], ids=lambda a: f"arity={a}")
def arity(request):
    """Both arities the tree is cross-checked at."""
    return request.param


@pytest.fixture
def tree(arity):
    """Empty depth-16 tree at the current arity."""
    return make_tree(arity=arity)


@pytest.fixture
def reference(arity):
    """Empty reference accumulator matching the `tree` fixture."""
    return make_reference(arity=arity)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep IMT_* variables from the developer's shell out of tests."""
    for name in ("IMT_DEPTH", "IMT_ARITY", "IMT_ZERO_VALUE", "IMT_HASH", "IMT_LOG_LEVEL", "IMT_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
