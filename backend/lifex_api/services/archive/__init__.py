"""
Cascading archive/restore engine.

- identifiers: typed primary keys (UUID token or short code)
- registry: immutable entity graph (parents and derived children)
- gateway: persistence contract and its SQLAlchemy implementation
- service: ArchiveService, the archive and restore executors
"""

from .identifiers import CodeKey, Identifier, KeyKind, UuidKey, coerce, parse, to_raw
from .registry import (
    REGISTRY,
    ChildRef,
    EntityRegistry,
    EntityType,
    ParentRef,
    RegistryBuilder,
    build_registry,
)
from .gateway import ArchiveGateway, SqlAlchemyArchiveGateway
from .service import ArchiveService, CascadeReport, TransitionedRecord

__all__ = [
    "CodeKey",
    "Identifier",
    "KeyKind",
    "UuidKey",
    "coerce",
    "parse",
    "to_raw",
    "REGISTRY",
    "ChildRef",
    "EntityRegistry",
    "EntityType",
    "ParentRef",
    "RegistryBuilder",
    "build_registry",
    "ArchiveGateway",
    "SqlAlchemyArchiveGateway",
    "ArchiveService",
    "CascadeReport",
    "TransitionedRecord",
]


def get_archive_service(db) -> ArchiveService:
    """Factory function for dependency injection."""
    return ArchiveService(db)
