"""
LifeX CLI.

Command-line interface for operators: inspect the archive entity graph and
archive/restore records without going through the HTTP API.
"""

import sys

import typer
from rich.console import Console
from rich.table import Table

from lifex_api.models import ArchiveState, Base
from lifex_api.services.archive import REGISTRY, ArchiveService, CascadeReport
from shared.config.constants import ArchiveAction
from shared.config.logging import audit_archived, audit_failed, audit_restored
from shared.config.settings import settings
from shared.infrastructure.db import engine, get_db_context
from shared.utils.exceptions import AppException

app = typer.Typer(
    name="lifex",
    help="LifeX Datawarehouse CLI",
    add_completion=False,
)
console = Console()


def _print_report(report: CascadeReport) -> None:
    table = Table(title=f"{report.direction.value.title()} {report.entity} {report.id}")
    table.add_column("Entity", style="cyan")
    table.add_column("ID", style="green")
    for record in report.transitioned:
        table.add_row(record.entity, record.id)
    console.print(table)
    console.print(
        f"[green]✓ {report.affected_count} record(s) changed by {report.actor}[/green]"
    )


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def init_db():
    """Create missing tables for every model."""
    console.print(f"[blue]Creating tables on: {engine.url.render_as_string(hide_password=True)}[/blue]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created/verified[/green]")


# =============================================================================
# Archive Commands
# =============================================================================

@app.command()
def entity_types():
    """List archivable entity types and their graph edges."""
    table = Table(title="Archive Entity Graph")
    table.add_column("Entity", style="cyan")
    table.add_column("Key", style="yellow")
    table.add_column("Aliases")
    table.add_column("Parents", style="magenta")
    table.add_column("Children", style="green")

    for entity in REGISTRY.entity_types():
        table.add_row(
            entity.name,
            f"{entity.pk} ({entity.key_kind.value})",
            ", ".join(entity.aliases),
            ", ".join(f"{r.parent}.{r.fk_column}" for r in entity.parents) or "-",
            ", ".join(f"{r.child}.{r.fk_column}" for r in entity.children) or "-",
        )

    console.print(table)


@app.command()
def archive(
    entity_type: str = typer.Argument(..., help="Entity alias, e.g. site or workingposition"),
    entity_id: str = typer.Argument(..., help="Primary key (UUID or code)"),
    actor: str = typer.Option(None, "--actor", "-a", help="Recorded as archived_by"),
):
    """Archive a record and everything that depends on it."""
    _cascade(ArchiveAction.ARCHIVE, entity_type, entity_id, actor)


@app.command()
def restore(
    entity_type: str = typer.Argument(..., help="Entity alias"),
    entity_id: str = typer.Argument(..., help="Primary key (UUID or code)"),
    actor: str = typer.Option(None, "--actor", "-a", help="Acting user for the audit log"),
):
    """Restore a record with its archived ancestors and descendants."""
    _cascade(ArchiveAction.RESTORE, entity_type, entity_id, actor)


def _cascade(action: ArchiveAction, entity_type: str, entity_id: str, actor: str | None) -> None:
    actor = actor or settings.archive_default_actor
    with get_db_context() as db:
        service = ArchiveService(db)
        try:
            if action is ArchiveAction.ARCHIVE:
                report = service.archive_cascade(entity_type, entity_id, actor)
            else:
                report = service.restore_cascade(entity_type, entity_id, actor)
        except AppException as e:
            audit_failed(action.value, entity_type, {"id": entity_id}, e.detail, actor=actor)
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    if not report.found:
        audit_failed(action.value, report.entity, {report.pk: report.id}, "not found", actor=actor)
        console.print(f"[yellow]{report.entity} {report.id} not found[/yellow]")
        raise typer.Exit(2)

    if action is ArchiveAction.ARCHIVE:
        audit_archived(report.entity, {report.pk: report.id}, report.actor, affected=report.affected_count)
    else:
        audit_restored(report.entity, {report.pk: report.id}, report.actor, affected=report.affected_count)
    _print_report(report)


@app.command("list")
def list_records(
    entity_type: str = typer.Argument(..., help="Entity alias"),
    state: str = typer.Option("ARCHIVED", "--state", "-s", help="ACTIVE, ARCHIVED or ALL"),
    limit: int = typer.Option(50, help="Max rows to show"),
):
    """Show rows of an entity type by archive state."""
    with get_db_context() as db:
        service = ArchiveService(db)
        try:
            rows = service.list_records(entity_type, ArchiveState.from_raw(state), limit)
            name = service.canonical_name(entity_type)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    table = Table(title=f"{name} ({state.upper()})")
    table.add_column("ID", style="cyan")
    table.add_column("Archived", style="yellow")
    table.add_column("Archived At")
    table.add_column("Archived By", style="green")
    for row in rows:
        table.add_row(
            row["id"],
            "yes" if row["is_archived"] else "no",
            str(row["archived_at"] or "-"),
            row["archived_by"] or "-",
        )
    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="LifeX Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Entity types", str(len(REGISTRY)))
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
