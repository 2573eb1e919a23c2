"""
CLI Prove Command

Build a tree from integer leaves and emit the proof for one of them.

Usage:
    imt prove 2 10 20 30 [--out proof.json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from imt.schemas.errors import IMTException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    try:
        tree = args.runtime_config.tree.build_tree(args.leaves)
        proof = tree.create_proof(args.index)
    except IMTException as e:
        logger.debug(f"Proof creation failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    output = json.dumps(proof.to_dict(), indent=2)

    if args.out:
        Path(args.out).write_text(output + "\n")
        logger.info(f"Wrote proof for leaf {args.index} to {args.out}")
    else:
        print(output)

    return EXIT_SUCCESS
