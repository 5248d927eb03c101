"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, get_settings, DATABASE_URL
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    ArchiveAction,
    CascadeDirection,
    Limits,
    ACTOR_HEADER,
    REQUEST_ID_HEADER,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "ArchiveAction",
    "CascadeDirection",
    "Limits",
    "ACTOR_HEADER",
    "REQUEST_ID_HEADER",
]
