"""
Centralized HTTP exceptions for consistent error handling.

Structural archive errors (unknown entity type, malformed identifier) are
raised before any mutation and surface as client errors; a missing record is
a ``False`` return from the engine which the HTTP layer turns into
``NotFoundError``.

Usage:
    from shared.utils.exceptions import NotFoundError, UnknownEntityTypeError

    raise UnknownEntityTypeError("warehouse")
    raise InvalidIdentifierFormatError("Site", "not-a-uuid", "UUID")
    raise NotFoundError("Site", site_id)
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Site", site_id)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Unsupported archiveState: X", field="archive_state")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class UnknownEntityTypeError(ValidationError):
    """Alias is not registered in the archive entity graph. Not retryable."""

    def __init__(self, alias: str | None, **log_context: Any):
        self.alias = alias
        super().__init__(f"Unsupported archive entity type: {alias}", alias=alias, **log_context)


class InvalidIdentifierFormatError(ValidationError):
    """Identifier text does not match the entity's key kind. Not retryable."""

    def __init__(self, entity: str, raw_id: Any, expected: str, **log_context: Any):
        self.entity = entity
        self.raw_id = raw_id
        if raw_id is None or not str(raw_id).strip():
            detail = f"{entity} id must not be blank"
        else:
            detail = f"Invalid {expected} for {entity}: {raw_id}"
        super().__init__(detail, entity=entity, raw_id=raw_id, expected=expected, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Registry misconfigured", alias="site")
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed; the enclosing transaction was rolled back."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
