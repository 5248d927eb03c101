"""
Pydantic schemas for the archive API endpoints.
"""

from datetime import datetime

from pydantic import BaseModel


# =============================================================================
# Entity Graph Schemas
# =============================================================================


class EdgeOutput(BaseModel):
    entity: str
    fk_column: str


class EntityTypeOutput(BaseModel):
    name: str
    table: str
    pk: str
    key_kind: str
    aliases: list[str]
    parents: list[EdgeOutput]
    children: list[EdgeOutput]


# =============================================================================
# Cascade Schemas
# =============================================================================


class TransitionedRecordOutput(BaseModel):
    entity: str
    id: str


class CascadeOutput(BaseModel):
    """Result of an archive or restore cascade."""
    success: bool
    message: str
    direction: str
    entity_type: str
    entity_id: str
    actor: str
    affected_count: int
    transitioned: list[TransitionedRecordOutput]


# =============================================================================
# Listing Schemas
# =============================================================================


class ArchiveRecordOutput(BaseModel):
    id: str
    is_archived: bool
    archived_at: datetime | None = None
    archived_by: str | None = None


class ArchiveListOutput(BaseModel):
    entity_type: str
    archive_state: str
    count: int
    items: list[ArchiveRecordOutput]
