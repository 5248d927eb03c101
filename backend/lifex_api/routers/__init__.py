"""
API routers.

- archive: cascading archive/restore and archive-state listing

All routes are prefixed with /api
"""

from .archive import router as archive_router

__all__ = ["archive_router"]
