"""
CLI Root Command

Build a tree from integer leaves and print its root.

Usage:
    imt root 1 2 3 [--depth N] [--arity N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from imt.schemas.errors import IMTException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def root_cmd(args: Namespace) -> int:
    """Handle root command."""
    tree_config = args.runtime_config.tree

    try:
        tree = tree_config.build_tree(args.leaves)
    except IMTException as e:
        logger.debug(f"Tree construction failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({
            "root": tree.root,
            "size": tree.size,
            "depth": tree.depth,
            "arity": tree.arity,
            "hash": tree_config.hash_name,
        }, indent=2))
    else:
        print(tree.root)

    return EXIT_SUCCESS
