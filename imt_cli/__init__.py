"""
Command-line interface for the incremental Merkle tree.
"""

__version__ = "0.1.0"
