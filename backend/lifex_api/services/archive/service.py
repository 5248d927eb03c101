"""
Cascading archive/restore service.

Archiving marks a record and everything that depends on it as logically
deleted; restoring brings a record back together with the ancestors it needs
and the descendants archived with it. Each top-level call is one depth-first
walk over the registry graph inside one transaction: it commits when the walk
completes and rolls back entirely on any failure, so no partial cascade is
ever persisted.

Usage:
    from lifex_api.services.archive import ArchiveService

    service = ArchiveService(db)
    found = service.archive("site", "8a0c...", actor="jdoe")
    report = service.restore_cascade("server", server_id, actor="jdoe")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifex_api.models import ArchiveState
from shared.config.constants import CascadeDirection, Limits
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import DatabaseError

from .gateway import ArchiveGateway, SqlAlchemyArchiveGateway
from .identifiers import Identifier, coerce, parse
from .registry import REGISTRY, EntityRegistry, EntityType

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransitionedRecord:
    entity: str
    id: str


@dataclass
class CascadeReport:
    """Outcome of one archive or restore call."""

    direction: CascadeDirection
    entity: str
    pk: str
    id: str
    actor: str
    found: bool = False
    transitioned: list[TransitionedRecord] = field(default_factory=list)

    @property
    def affected_count(self) -> int:
        return len(self.transitioned)

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction.value,
            "entity": self.entity,
            "id": self.id,
            "actor": self.actor,
            "found": self.found,
            "affected_count": self.affected_count,
            "transitioned": [{"entity": r.entity, "id": r.id} for r in self.transitioned],
        }


@dataclass
class _Walk:
    """Per-call state: visited keys, the stamp applied to every row, the report."""

    actor: str
    at: datetime
    report: CascadeReport
    visited: set[tuple[str, str, str]] = field(default_factory=set)

    def first_visit(self, direction: CascadeDirection, entity: EntityType, identifier: Identifier) -> bool:
        key = (direction.value, entity.table, str(identifier))
        if key in self.visited:
            return False
        self.visited.add(key)
        return True


class ArchiveService:
    """
    Archive and restore executors over the entity graph registry.

    Structural errors (``UnknownEntityTypeError``,
    ``InvalidIdentifierFormatError``) are raised before anything is read or
    written. A missing record is reported as ``False``/``found=False``.
    Storage failures roll the session back and surface as ``DatabaseError``.
    """

    def __init__(
        self,
        db: Session,
        registry: EntityRegistry = REGISTRY,
        gateway: ArchiveGateway | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._db = db
        self._registry = registry
        self._gateway = gateway if gateway is not None else SqlAlchemyArchiveGateway(db)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    # =========================================================================
    # Public API
    # =========================================================================

    def archive(self, alias: str, raw_id: str, actor: str | None = None) -> bool:
        """Archive the record and every reachable descendant. Returns whether it existed."""
        return self.archive_cascade(alias, raw_id, actor).found

    def restore(self, alias: str, raw_id: str, actor: str | None = None) -> bool:
        """Restore the record, its archived ancestors and its archived descendants."""
        return self.restore_cascade(alias, raw_id, actor).found

    def archive_cascade(self, alias: str, raw_id: str, actor: str | None = None) -> CascadeReport:
        return self._run(CascadeDirection.ARCHIVE, alias, raw_id, actor, self._archive_recursive)

    def restore_cascade(self, alias: str, raw_id: str, actor: str | None = None) -> CascadeReport:
        return self._run(CascadeDirection.RESTORE, alias, raw_id, actor, self._restore_recursive)

    def supports(self, alias: str | None) -> bool:
        return self._registry.supports(alias)

    def canonical_name(self, alias: str) -> str:
        return self._registry.canonical_name(alias)

    def list_records(
        self,
        alias: str,
        state: ArchiveState = ArchiveState.ACTIVE,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Archive columns of the entity's rows, filtered by archive state."""
        entity = self._registry.resolve(alias)
        max_rows = settings.archive_list_limit
        limit = max_rows if limit is None else max(1, min(limit, max_rows))
        rows = self._gateway.list_records(entity, state, limit)
        for row in rows:
            row["id"] = str(row["id"])
        return rows

    # =========================================================================
    # Cascade driver
    # =========================================================================

    def _run(
        self,
        direction: CascadeDirection,
        alias: str,
        raw_id: str,
        actor: str | None,
        walk_fn: Callable[[EntityType, Identifier, _Walk], None],
    ) -> CascadeReport:
        entity = self._registry.resolve(alias)
        identifier = parse(entity, raw_id)
        actor = self._normalize_actor(actor)

        walk = _Walk(
            actor=actor,
            at=self._clock(),
            report=CascadeReport(direction, entity.name, entity.pk, str(identifier), actor),
        )

        try:
            if self._gateway.exists(entity, identifier):
                walk.report.found = True
                walk_fn(entity, identifier, walk)
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error(
                f"Cascade {direction.value} failed, transaction rolled back",
                entity=entity.name,
                entity_id=str(identifier),
                error=str(exc),
            )
            raise DatabaseError(f"{direction.value} of {entity.name}") from exc
        except Exception:
            self._db.rollback()
            raise

        if walk.report.found:
            logger.info(
                f"Cascade {direction.value} completed",
                entity=entity.name,
                entity_id=str(identifier),
                actor=actor,
                affected_records=walk.report.affected_count,
            )
        else:
            logger.info(
                f"Cascade {direction.value} skipped, record not found",
                entity=entity.name,
                entity_id=str(identifier),
            )
        return walk.report

    def _normalize_actor(self, actor: str | None) -> str:
        if actor is None or not actor.strip():
            return settings.archive_default_actor
        return actor.strip()[: Limits.MAX_ACTOR_LENGTH]

    def _transition(self, entity: EntityType, identifier: Identifier, archived: bool, walk: _Walk) -> None:
        changed = self._gateway.transition_self(
            entity,
            identifier,
            archived,
            walk.actor if archived else None,
            walk.at if archived else None,
        )
        if changed:
            walk.report.transitioned.append(TransitionedRecord(entity.name, str(identifier)))
        else:
            # Already in the target state (earlier call or concurrent writer)
            logger.debug("Transition was a no-op", entity=entity.name, entity_id=str(identifier))

    # =========================================================================
    # Archive: children first, then self
    # =========================================================================

    def _archive_recursive(self, entity: EntityType, identifier: Identifier, walk: _Walk) -> None:
        if not walk.first_visit(CascadeDirection.ARCHIVE, entity, identifier):
            return

        for ref in entity.children:
            child = self._registry.resolve(ref.child)
            for child_id in self._gateway.find_child_identifiers(child, ref.fk_column, identifier, False):
                self._archive_recursive(child, child_id, walk)

        self._transition(entity, identifier, True, walk)

    # =========================================================================
    # Restore: archived ancestors, then self, then archived children
    # =========================================================================

    def _restore_recursive(self, entity: EntityType, identifier: Identifier, walk: _Walk) -> None:
        if not walk.first_visit(CascadeDirection.RESTORE, entity, identifier):
            return

        parent_values = self._gateway.read_foreign_key_values(entity, identifier)
        for ref in entity.parents:
            raw_parent = parent_values.get(ref.fk_column)
            if raw_parent is None:
                continue
            parent = self._registry.resolve(ref.parent)
            parent_id = coerce(parent, raw_parent)
            if parent_id is None:
                logger.warning(
                    "Skipping uncoercible parent reference",
                    entity=entity.name,
                    column=ref.fk_column,
                    value=raw_parent,
                )
                continue
            # Dangling references (parent row gone) and active parents are skipped
            if self._gateway.exists(parent, parent_id, archived=True):
                self._restore_recursive(parent, parent_id, walk)

        self._transition(entity, identifier, False, walk)

        for ref in entity.children:
            child = self._registry.resolve(ref.child)
            for child_id in self._gateway.find_child_identifiers(child, ref.fk_column, identifier, True):
                self._restore_recursive(child, child_id, walk)
