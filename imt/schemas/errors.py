"""
Schemas
File: errors.py

Purpose: Error taxonomy for the incremental Merkle tree.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the library."""

    # Construction
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Mutation
    TREE_CAPACITY_EXCEEDED = "TREE_CAPACITY_EXCEEDED"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Proofs
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class IMTError(BaseModel):
    """
    Base error model for structured error reporting.

    Used where an error has to be passed around (or printed by the CLI)
    without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CONFIGURATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "IMTException":
        """Convert this error model to a raised exception."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_type is None:
            return IMTException(
                message=self.message,
                code=self.code,
                details=self.details,
                retryable=self.retryable,
            )
        return exc_type(message=self.message, details=self.details)


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class IMTException(Exception):
    """
    Base exception for all tree errors.

    Carries structured error information and can be converted
    to/from IMTError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "IMT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> IMTError:
        """Convert this exception to an IMTError model."""
        return IMTError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(IMTException, ValueError):
    """Raised for invalid constructor or configuration arguments."""

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if parameter:
            full_details["parameter"] = parameter
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )


class CapacityError(IMTException):
    """Raised when inserting into a full tree. The tree is left unchanged."""

    def __init__(
        self,
        message: str = "The tree is full",
        capacity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if capacity is not None:
            full_details["capacity"] = capacity
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_CAPACITY_EXCEEDED,
            details=full_details,
            retryable=True,
        )


class NotFoundError(IMTException, IndexError):
    """Raised when an operation references a leaf index outside the tree."""

    def __init__(
        self,
        message: str = "The leaf does not exist in this tree",
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[IMTException]] = {
    ErrorCodes.CONFIGURATION_ERROR: ConfigurationError,
    ErrorCodes.TREE_CAPACITY_EXCEEDED: CapacityError,
    ErrorCodes.LEAF_NOT_FOUND: NotFoundError,
}
