"""
Persistence gateway for the archive engine.

``ArchiveGateway`` is the narrow contract the cascade executors depend on;
``SqlAlchemyArchiveGateway`` implements it with SQLAlchemy Core statements
against the tables of the ORM metadata, inside the transaction of the given
session. Nothing here commits.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import MetaData, Table, literal, select, update
from sqlalchemy.orm import Session

from lifex_api.models import ArchiveState, Base
from shared.config.logging import get_logger
from shared.utils.exceptions import InternalError

from .identifiers import Identifier, coerce, to_raw
from .registry import EntityType

logger = get_logger(__name__)


class ArchiveGateway(Protocol):
    def exists(self, entity: EntityType, identifier: Identifier, archived: bool | None = None) -> bool:
        """Whether the row exists (optionally restricted to one archive state)."""
        ...

    def transition_self(
        self,
        entity: EntityType,
        identifier: Identifier,
        archived: bool,
        actor: str | None,
        at: datetime | None,
    ) -> bool:
        """Move one row to ``archived`` if it is in the opposite state; True when a row changed."""
        ...

    def find_child_identifiers(
        self,
        child: EntityType,
        fk_column: str,
        parent_id: Identifier,
        archived: bool,
    ) -> list[Identifier]:
        ...

    def read_foreign_key_values(self, entity: EntityType, identifier: Identifier) -> dict[str, Any]:
        """Raw values of the entity's parent foreign-key columns (empty when the row is gone)."""
        ...

    def list_records(
        self,
        entity: EntityType,
        state: ArchiveState = ArchiveState.ACTIVE,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        ...


class SqlAlchemyArchiveGateway:
    """ArchiveGateway over a SQLAlchemy session."""

    def __init__(self, db: Session, metadata: MetaData | None = None):
        self._db = db
        self._metadata = metadata if metadata is not None else Base.metadata

    def _table(self, entity: EntityType) -> Table:
        table = self._metadata.tables.get(entity.table)
        if table is None:
            raise InternalError(
                f"No table mapped for archive entity {entity.name}",
                entity=entity.name,
                table=entity.table,
            )
        return table

    def exists(self, entity: EntityType, identifier: Identifier, archived: bool | None = None) -> bool:
        table = self._table(entity)
        stmt = select(literal(1)).select_from(table).where(table.c[entity.pk] == to_raw(identifier))
        if archived is not None:
            stmt = stmt.where(table.c.is_archived.is_(archived))
        return self._db.execute(stmt.limit(1)).first() is not None

    def transition_self(
        self,
        entity: EntityType,
        identifier: Identifier,
        archived: bool,
        actor: str | None,
        at: datetime | None,
    ) -> bool:
        table = self._table(entity)
        stmt = (
            update(table)
            .where(
                table.c[entity.pk] == to_raw(identifier),
                table.c.is_archived.is_(not archived),
            )
            .values(
                is_archived=archived,
                archived_at=at if archived else None,
                archived_by=actor if archived else None,
            )
        )
        result = self._db.execute(stmt)
        return result.rowcount > 0

    def find_child_identifiers(
        self,
        child: EntityType,
        fk_column: str,
        parent_id: Identifier,
        archived: bool,
    ) -> list[Identifier]:
        table = self._table(child)
        pk = table.c[child.pk]
        stmt = (
            select(pk)
            .where(table.c[fk_column] == to_raw(parent_id), table.c.is_archived.is_(archived))
            .order_by(pk)
        )
        identifiers = []
        for value in self._db.execute(stmt).scalars():
            identifier = coerce(child, value)
            if identifier is None:
                logger.warning("Skipping uncoercible child key", entity=child.name, value=value)
                continue
            identifiers.append(identifier)
        return identifiers

    def read_foreign_key_values(self, entity: EntityType, identifier: Identifier) -> dict[str, Any]:
        if not entity.parents:
            return {}
        table = self._table(entity)
        columns = [table.c[ref.fk_column] for ref in entity.parents]
        row = self._db.execute(
            select(*columns).where(table.c[entity.pk] == to_raw(identifier))
        ).first()
        if row is None:
            return {}
        return dict(row._mapping)

    def list_records(
        self,
        entity: EntityType,
        state: ArchiveState = ArchiveState.ACTIVE,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Primary key and archive columns of up to ``limit`` rows visible under ``state``."""
        table = self._table(entity)
        stmt = select(
            table.c[entity.pk].label("id"),
            table.c.is_archived,
            table.c.archived_at,
            table.c.archived_by,
        )
        stmt = state.apply(stmt, table.c.is_archived).order_by(table.c[entity.pk]).limit(limit)
        return [dict(row._mapping) for row in self._db.execute(stmt)]
