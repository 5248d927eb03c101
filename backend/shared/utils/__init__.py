"""
Utilities module: Exceptions.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    UnknownEntityTypeError,
    InvalidIdentifierFormatError,
    InternalError,
    DatabaseError,
)

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "UnknownEntityTypeError",
    "InvalidIdentifierFormatError",
    "InternalError",
    "DatabaseError",
]
