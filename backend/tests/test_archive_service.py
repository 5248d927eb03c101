"""
Tests for ArchiveService - the cascading archive executor.

Tests cover:
- Cascade over every transitive child, nothing else touched
- Idempotency (second call keeps the first stamp)
- Diamond-shaped graphs
- Missing records and structural errors (no mutation)
- Rollback when the store fails mid-cascade
"""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from lifex_api.models import ArchiveState, Base
from lifex_api.services.archive import ArchiveService, SqlAlchemyArchiveGateway
from shared.utils.exceptions import DatabaseError, InvalidIdentifierFormatError, UnknownEntityTypeError


def _naive(value: datetime) -> datetime:
    # SQLite drops the offset of DateTime(timezone=True) columns
    return value.replace(tzinfo=None)


def _snapshot(db_session) -> dict:
    """Every row of every table, for byte-for-byte comparisons."""
    db_session.expire_all()
    return {
        table.name: sorted(tuple(map(str, row)) for row in db_session.execute(select(table)))
        for table in Base.metadata.sorted_tables
    }


class FailingGateway(SqlAlchemyArchiveGateway):
    """Raises from transition_self once the named entity is reached."""

    def __init__(self, db, fail_on: str, error: Exception):
        super().__init__(db)
        self.fail_on = fail_on
        self.error = error

    def transition_self(self, entity, identifier, archived, actor, at):
        if entity.name == self.fail_on:
            raise self.error
        return super().transition_self(entity, identifier, archived, actor, at)


@pytest.fixture
def service(db_session, fixed_clock):
    return ArchiveService(db_session, clock=fixed_clock)


class TestArchiveCascade:
    """archive() archives the root and every transitive child."""

    def test_archive_site_cascades_to_equipment(self, service, graph, now):
        assert service.archive("site", str(graph.site.site_id), "jdoe") is True

        for record in (
            graph.site, graph.server, graph.workstation, graph.headset,
            graph.radio, graph.installed, graph.project_site, graph.contract,
        ):
            assert record.is_archived is True, record
            assert record.archived_by == "jdoe"
            assert _naive(record.archived_at) == _naive(now)

    def test_archive_site_leaves_other_records_unchanged(self, service, graph):
        service.archive("site", str(graph.site.site_id), "jdoe")

        for record in (
            graph.country, graph.city, graph.address, graph.account, graph.variant,
            graph.project, graph.other_site, graph.other_server, graph.software,
        ):
            assert record.is_archived is False, record
            assert record.archived_at is None
            assert record.archived_by is None

    def test_country_chain(self, service, graph, now):
        """Country(AT) -> City(AT-VIENNA) -> Address -> Site -> Server in one call."""
        assert service.archive("country", "AT", "ops") is True

        for record in (graph.country, graph.city, graph.address, graph.site, graph.server):
            assert record.is_archived is True, record
            assert record.archived_by == "ops"
            assert record.archived_at is not None
            assert _naive(record.archived_at) == _naive(now)

        # Reached through Address -> Project
        assert graph.project.is_archived is True
        assert graph.other_site.is_archived is True
        # Parents of archived records are never archived
        assert graph.account.is_archived is False
        assert graph.variant.is_archived is False
        assert graph.software.is_archived is False

    def test_children_are_archived_before_parent(self, service, graph):
        report = service.archive_cascade("site", str(graph.site.site_id), "jdoe")
        order = [record.entity for record in report.transitioned]

        assert order[-1] == "Site"
        assert order.index("AudioDevice") < order.index("Clients")
        assert report.affected_count == len(order) == 8

    def test_report_describes_the_call(self, service, graph):
        report = service.archive_cascade("SERVER", f" {graph.server.server_id} ", "jdoe")
        assert report.found is True
        assert report.entity == "Server"
        assert report.pk == "server_id"
        assert report.id == str(graph.server.server_id)
        assert report.to_dict()["transitioned"] == [
            {"entity": "Server", "id": str(graph.server.server_id)}
        ]


class TestArchiveIdempotency:
    def test_second_archive_keeps_first_stamp(self, db_session, graph, now):
        later = now + timedelta(hours=1)
        first = ArchiveService(db_session, clock=lambda: now)
        second = ArchiveService(db_session, clock=lambda: later)

        first.archive("site", str(graph.site.site_id), "first")
        after_first = _snapshot(db_session)
        report = second.archive_cascade("site", str(graph.site.site_id), "second")

        assert report.found is True
        assert report.affected_count == 0
        assert _snapshot(db_session) == after_first
        assert graph.site.archived_by == "first"
        assert _naive(graph.server.archived_at) == _naive(now)

    def test_archived_children_are_not_restamped(self, service, db_session, graph, now):
        """A child archived earlier keeps its own stamp when its parent is archived."""
        earlier = ArchiveService(db_session, clock=lambda: now - timedelta(days=1))
        earlier.archive("server", str(graph.server.server_id), "early")

        report = service.archive_cascade("site", str(graph.site.site_id), "late")

        assert "Server" not in {record.entity for record in report.transitioned}
        assert graph.server.archived_by == "early"
        assert graph.site.archived_by == "late"


class TestArchiveDiamond:
    def test_site_reached_twice_is_archived_once(self, service, graph):
        """Address -> Site directly and Address -> Project -> Site."""
        report = service.archive_cascade("address", str(graph.address.address_id), "jdoe")

        keys = [(record.entity, record.id) for record in report.transitioned]
        assert len(keys) == len(set(keys))
        assert keys.count(("Site", str(graph.site.site_id))) == 1
        assert graph.site.is_archived is True

    def test_radio_reached_through_site_and_workstation(self, service, graph):
        report = service.archive_cascade("site", str(graph.site.site_id), "jdoe")
        radios = [r for r in report.transitioned if r.entity == "Radio"]
        assert len(radios) == 1

    def test_contract_reached_through_account_project_and_site(self, service, graph):
        report = service.archive_cascade("account", str(graph.account.account_id), "jdoe")
        contracts = [r for r in report.transitioned if r.entity == "ServiceContract"]
        assert len(contracts) == 1
        assert graph.contract.is_archived is True
        assert graph.project.is_archived is True


class TestArchiveNotFound:
    def test_missing_project_returns_false_without_changes(self, service, db_session, graph):
        before = _snapshot(db_session)

        assert service.archive("project", str(uuid.uuid4()), "jdoe") is False
        assert _snapshot(db_session) == before

    def test_missing_report(self, service, graph):
        report = service.archive_cascade("country", "ZZ", "jdoe")
        assert report.found is False
        assert report.transitioned == []


class TestArchiveStructuralErrors:
    def test_unknown_entity_type(self, service, db_session, graph):
        before = _snapshot(db_session)
        with pytest.raises(UnknownEntityTypeError):
            service.archive("warehouse", str(graph.site.site_id), "jdoe")
        assert _snapshot(db_session) == before

    def test_malformed_uuid(self, service, db_session, graph):
        before = _snapshot(db_session)
        with pytest.raises(InvalidIdentifierFormatError):
            service.archive("site", "AT-VIENNA", "jdoe")
        assert _snapshot(db_session) == before

    def test_blank_id(self, service, graph):
        with pytest.raises(InvalidIdentifierFormatError):
            service.archive("country", "  ", "jdoe")


class TestArchiveRollback:
    def test_store_failure_rolls_back_whole_cascade(self, db_session, fixed_clock, graph):
        """Children already updated in the transaction are reverted."""
        error = OperationalError("UPDATE site", {}, Exception("disk I/O error"))
        service = ArchiveService(
            db_session,
            gateway=FailingGateway(db_session, fail_on="Site", error=error),
            clock=fixed_clock,
        )
        before = _snapshot(db_session)

        with pytest.raises(DatabaseError) as exc_info:
            service.archive("site", str(graph.site.site_id), "jdoe")

        assert exc_info.value.status_code == 500
        assert exc_info.value.__cause__ is error
        assert _snapshot(db_session) == before
        assert graph.server.is_archived is False

    def test_unexpected_error_rolls_back_and_propagates(self, db_session, fixed_clock, graph):
        service = ArchiveService(
            db_session,
            gateway=FailingGateway(db_session, fail_on="Site", error=RuntimeError("boom")),
            clock=fixed_clock,
        )
        before = _snapshot(db_session)

        with pytest.raises(RuntimeError, match="boom"):
            service.archive("site", str(graph.site.site_id), "jdoe")

        assert _snapshot(db_session) == before


class TestArchiveActor:
    @pytest.mark.parametrize("actor", [None, "", "   "])
    def test_blank_actor_defaults_to_system(self, service, graph, actor):
        service.archive("server", str(graph.server.server_id), actor)
        assert graph.server.archived_by == "system"

    def test_actor_is_trimmed_and_capped(self, service, graph):
        service.archive("server", str(graph.server.server_id), "  " + "a" * 150)
        assert graph.server.archived_by == "a" * 100


class TestListRecords:
    def test_filter_by_state(self, service, graph):
        service.archive("server", str(graph.server.server_id), "jdoe")

        archived = service.list_records("server", state=ArchiveState.ARCHIVED)
        active = service.list_records("server")
        everything = service.list_records("server", state=ArchiveState.ALL)

        assert [row["id"] for row in archived] == [str(graph.server.server_id)]
        assert archived[0]["archived_by"] == "jdoe"
        assert [row["id"] for row in active] == [str(graph.other_server.server_id)]
        assert len(everything) == 2

    def test_limit(self, service, graph):
        assert len(service.list_records("site", state=ArchiveState.ALL, limit=1)) == 1
