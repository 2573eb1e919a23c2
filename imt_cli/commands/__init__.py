"""
CLI command modules.
"""

from imt_cli.commands import prove, root, verify

__all__ = ["prove", "root", "verify"]
