"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m imt_cli root <leaf>... [--depth N] [--arity N] [--hash NAME] [--json]
    python -m imt_cli prove <index> <leaf>... [--out PATH]
    python -m imt_cli verify <proof_file> [--hash NAME]
    python -m imt_cli config --show

Environment Variables:
    IMT_DEPTH          Tree depth (default: 16)
    IMT_ARITY          Children per node (default: 2)
    IMT_ZERO_VALUE     Empty-leaf value (default: 0)
    IMT_HASH           Hash adapter: sha256, blake2s (default: sha256)
    IMT_LOG_LEVEL      Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from imt.config import RuntimeConfig
from imt.crypto.hashing import HASH_FUNCTIONS
from imt_cli.commands import prove, root, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_tree_arguments(parser: argparse.ArgumentParser, zero_value: bool = True) -> None:
    parser.add_argument("--depth", type=int, default=None, help="Tree depth (overrides config)")
    parser.add_argument("--arity", type=int, default=None, help="Children per node (overrides config)")
    if zero_value:
        parser.add_argument(
            "--zero-value",
            type=lambda s: int(s, 0),
            default=None,
            help="Empty-leaf value (overrides config)",
        )
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        choices=sorted(HASH_FUNCTIONS),
        help="Hash adapter (overrides config)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="imt",
        description="Incremental Merkle tree CLI - compute roots, create and verify proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root of a tree built from the given leaves",
    )
    root_parser.add_argument("leaves", nargs="*", type=lambda s: int(s, 0), help="Integer leaves")
    _add_tree_arguments(root_parser)
    root_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print a membership proof for one leaf",
    )
    prove_parser.add_argument("index", type=int, help="Index of the leaf to prove")
    prove_parser.add_argument("leaves", nargs="+", type=lambda s: int(s, 0), help="Integer leaves")
    _add_tree_arguments(prove_parser)
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this file instead of stdout",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof file against the root it carries",
    )
    verify_parser.add_argument("proof_file", type=str, help="Path to proof JSON")
    # Verification only needs the proof shape and the hash
    _add_tree_arguments(verify_parser, zero_value=False)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective configuration",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def load_runtime_config(args: argparse.Namespace) -> RuntimeConfig:
    """Config file (if any), then environment, then command-line flags."""
    if args.config is not None:
        config = RuntimeConfig.from_yaml(args.config).with_env_overrides()
    else:
        config = RuntimeConfig.from_env()

    if args.log_level:
        config.log_level = args.log_level

    tree = config.tree
    if getattr(args, "depth", None) is not None:
        tree.depth = args.depth
    if getattr(args, "arity", None) is not None:
        tree.arity = args.arity
    if getattr(args, "zero_value", None) is not None:
        tree.zero_value = args.zero_value
    if getattr(args, "hash", None) is not None:
        tree.hash_name = args.hash

    return config


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: imt config --show")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_SUCCESS

    try:
        args.runtime_config = load_runtime_config(args)
        setup_logging(args.runtime_config.log_level, args.runtime_config.log_file)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.runtime_config.log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
