"""
CLI Verify Command

Verify a proof file offline against the root it carries.

Usage:
    imt verify proof.json [--hash sha256]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from pydantic import ValidationError

from imt.crypto.hashing import get_hash_function
from imt.merkle.tree import verify_merkle_proof
from imt.schemas.errors import IMTException
from imt.schemas.proof import MerkleProof


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_proof(path: str | Path) -> MerkleProof:
    """
    Read a proof JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or not a proof
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Proof file not found: {path}")

    try:
        data = json.loads(path.read_text())
        return MerkleProof.model_validate(data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    except ValidationError as e:
        raise ValueError(f"Not a proof: {path}: {e.error_count()} validation error(s)") from e


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    tree_config = args.runtime_config.tree

    try:
        proof = load_proof(args.proof_file)
        hash_fn = get_hash_function(tree_config.hash_name)
    except (FileNotFoundError, ValueError, IMTException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Depth and arity come from the proof unless given on the command line
    depth = getattr(args, "depth", None)
    arity = getattr(args, "arity", None)

    if verify_merkle_proof(proof, hash_fn, depth=depth, arity=arity):
        print(f"OK: leaf {proof.leaf_index} is included in root {proof.root}")
        return EXIT_SUCCESS

    logger.debug(f"Proof for leaf {proof.leaf_index} did not verify")
    print(f"FAILED: proof for leaf {proof.leaf_index} does not match its root")
    return EXIT_VERIFICATION_FAILED
