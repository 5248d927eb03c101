"""
Archive and restore endpoints.

Thin HTTP adapter over ArchiveService: resolves the acting user, maps a
``False`` (record not found) to 404 and writes the audit trail. Structural
errors raised by the engine are already 400 responses.
"""

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from lifex_api.models import ArchiveState
from lifex_api.routers.archive_schemas import (
    ArchiveListOutput,
    ArchiveRecordOutput,
    CascadeOutput,
    EdgeOutput,
    EntityTypeOutput,
    TransitionedRecordOutput,
)
from lifex_api.services.archive import ArchiveService, CascadeReport, get_archive_service
from shared.config.constants import ACTOR_HEADER, ArchiveAction
from shared.config.logging import audit_archived, audit_failed, audit_restored
from shared.infrastructure.db import get_db
from shared.utils.exceptions import AppException, NotFoundError


router = APIRouter(prefix="/api/archive", tags=["archive"])


def get_service(db: Session = Depends(get_db)) -> ArchiveService:
    return get_archive_service(db)


def _to_output(report: CascadeReport, action: ArchiveAction) -> CascadeOutput:
    verb = "archived" if action is ArchiveAction.ARCHIVE else "restored"
    return CascadeOutput(
        success=True,
        message=f"{report.entity} '{report.id}' {verb} ({report.affected_count} records changed)",
        direction=report.direction.value,
        entity_type=report.entity,
        entity_id=report.id,
        actor=report.actor,
        affected_count=report.affected_count,
        transitioned=[
            TransitionedRecordOutput(entity=r.entity, id=r.id) for r in report.transitioned
        ],
    )


def _run_cascade(
    service: ArchiveService,
    action: ArchiveAction,
    entity_type: str,
    entity_id: str,
    actor: str | None,
) -> CascadeOutput:
    entity_name = entity_type
    try:
        if action is ArchiveAction.ARCHIVE:
            report = service.archive_cascade(entity_type, entity_id, actor)
        else:
            report = service.restore_cascade(entity_type, entity_id, actor)
        entity_name = report.entity
        if not report.found:
            raise NotFoundError(report.entity, entity_id)
    except AppException as exc:
        audit_failed(action.value, entity_name, {"id": entity_id}, exc.detail, actor=actor)
        raise

    identifiers = {report.pk: report.id}
    if action is ArchiveAction.ARCHIVE:
        audit_archived(report.entity, identifiers, report.actor, affected=report.affected_count)
    else:
        audit_restored(report.entity, identifiers, report.actor, affected=report.affected_count)
    return _to_output(report, action)


@router.get("/entity-types", response_model=list[EntityTypeOutput])
def list_entity_types(service: ArchiveService = Depends(get_service)) -> list[EntityTypeOutput]:
    """Registered archivable entity types with their aliases and graph edges."""
    return [
        EntityTypeOutput(
            name=entity.name,
            table=entity.table,
            pk=entity.pk,
            key_kind=entity.key_kind.value,
            aliases=list(entity.aliases),
            parents=[EdgeOutput(entity=ref.parent, fk_column=ref.fk_column) for ref in entity.parents],
            children=[EdgeOutput(entity=ref.child, fk_column=ref.fk_column) for ref in entity.children],
        )
        for entity in service.registry.entity_types()
    ]


@router.get("/{entity_type}", response_model=ArchiveListOutput)
def list_records(
    entity_type: str,
    archive_state: str | None = Query(default=None, alias="archiveState"),
    limit: int | None = Query(default=None, ge=1),
    service: ArchiveService = Depends(get_service),
) -> ArchiveListOutput:
    """
    List rows of an entity type with their archive columns.

    archiveState: ACTIVE (default), ARCHIVED or ALL.
    """
    state = ArchiveState.from_raw(archive_state)
    rows = service.list_records(entity_type, state, limit)
    return ArchiveListOutput(
        entity_type=service.canonical_name(entity_type),
        archive_state=state.value,
        count=len(rows),
        items=[ArchiveRecordOutput(**row) for row in rows],
    )


@router.delete("/{entity_type}/{entity_id}", response_model=CascadeOutput)
def archive_entity(
    entity_type: str,
    entity_id: str,
    actor: str | None = Header(default=None, alias=ACTOR_HEADER),
    service: ArchiveService = Depends(get_service),
) -> CascadeOutput:
    """Archive an entity and all of its dependents."""
    return _run_cascade(service, ArchiveAction.ARCHIVE, entity_type, entity_id, actor)


@router.post("/{entity_type}/{entity_id}/restore", response_model=CascadeOutput)
def restore_entity(
    entity_type: str,
    entity_id: str,
    actor: str | None = Header(default=None, alias=ACTOR_HEADER),
    service: ArchiveService = Depends(get_service),
) -> CascadeOutput:
    """Restore an archived entity with its archived ancestors and descendants."""
    return _run_cascade(service, ArchiveAction.RESTORE, entity_type, entity_id, actor)
