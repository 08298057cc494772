"""
Error handling for nullables.

Every failure raised by this package derives from NullableArrayError and
carries a numeric code, so callers can branch on the kind of failure
("has nulls" vs. "wrong shape") without parsing messages. The concrete
classes also derive from the matching builtin (IndexError, ValueError,
TypeError) so generic array code keeps working.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

NULLABLE_OK = 0

# General errors (1-9)
NULLABLE_ERROR_UNKNOWN = 1

# Shape/bounds errors (10-19)
NULLABLE_ERROR_DIMENSION_MISMATCH = 11
NULLABLE_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Type errors (20-29)
NULLABLE_ERROR_TYPE_ERROR = 20

# Null-presence errors (60-69)
NULLABLE_ERROR_NULL_VALUE = 60


_ERROR_MESSAGES = {
    NULLABLE_OK: "Success",
    NULLABLE_ERROR_UNKNOWN: "Unknown error",
    NULLABLE_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    NULLABLE_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    NULLABLE_ERROR_TYPE_ERROR: "Unsupported element type",
    NULLABLE_ERROR_NULL_VALUE: "Null value encountered",
}


# =============================================================================
# Exception Classes
# =============================================================================

class NullableArrayError(Exception):
    """
    Base exception for all nullables errors.

    Attributes:
        code: Numeric error code (NULLABLE_ERROR_*)
        message: Human readable description
    """

    code = NULLABLE_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_context(cls, context: str) -> "NullableArrayError":
        """Create exception with the default message prefixed by context."""
        base_msg = _ERROR_MESSAGES.get(cls.code, "Unknown error")
        return cls(f"{context}: {base_msg}")


class BoundsError(NullableArrayError, IndexError):
    """Destination too small, negative length, or index outside the array."""

    code = NULLABLE_ERROR_INDEX_OUT_OF_BOUNDS


class DimensionMismatchError(NullableArrayError, ValueError):
    """Shapes disagree, or the operation does not apply to this ndim."""

    code = NULLABLE_ERROR_DIMENSION_MISMATCH


class ElementTypeError(NullableArrayError, TypeError):
    """The element type does not support the requested operation."""

    code = NULLABLE_ERROR_TYPE_ERROR


class NullException(NullableArrayError):
    """
    A null was found where a value is required.

    Raised by strict conversion of an array that contains nulls and by
    reading the payload of a null scalar.
    """

    code = NULLABLE_ERROR_NULL_VALUE


def error_message(code: int) -> str:
    """Return the default message for an error code."""
    return _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")


__all__ = [
    # Codes
    "NULLABLE_OK",
    "NULLABLE_ERROR_UNKNOWN",
    "NULLABLE_ERROR_DIMENSION_MISMATCH",
    "NULLABLE_ERROR_INDEX_OUT_OF_BOUNDS",
    "NULLABLE_ERROR_TYPE_ERROR",
    "NULLABLE_ERROR_NULL_VALUE",
    # Exceptions
    "NullableArrayError",
    "BoundsError",
    "DimensionMismatchError",
    "ElementTypeError",
    "NullException",
    "error_message",
]
