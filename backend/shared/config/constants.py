"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import ArchiveAction, ACTOR_HEADER

    if action == ArchiveAction.ARCHIVE:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# HTTP headers
# =============================================================================

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
# Identifies who triggered an archive/restore (recorded in archived_by)
ACTOR_HEADER: Final[str] = "X-Actor"


# =============================================================================
# Archive engine
# =============================================================================


class ArchiveAction(str, Enum):
    """Audit action names for the archive lifecycle."""

    ARCHIVE = "ARCHIVE"
    RESTORE = "RESTORE"


class CascadeDirection(str, Enum):
    """Direction tag used in cascade visited-set keys."""

    ARCHIVE = "archive"
    RESTORE = "restore"


class Limits:
    """Application-wide limits."""

    MAX_ALIAS_LENGTH: Final[int] = 64
    MAX_ACTOR_LENGTH: Final[int] = 100
    MAX_CODE_LENGTH: Final[int] = 50
