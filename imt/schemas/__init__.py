"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

from .errors import (
    CapacityError,
    ConfigurationError,
    ErrorCodes,
    IMTError,
    IMTException,
    NotFoundError,
)
from .proof import MerkleProof

__all__ = [
    # Errors
    "ErrorCodes",
    "IMTError",
    "IMTException",
    "ConfigurationError",
    "CapacityError",
    "NotFoundError",
    # Proofs
    "MerkleProof",
]
