"""
Tests for ArchiveState parsing and query filtering.
"""

import pytest
from sqlalchemy import select

from lifex_api.models import ArchiveState, Server
from shared.utils.exceptions import ValidationError


class TestFromRaw:
    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_blank_defaults_to_active(self, raw):
        assert ArchiveState.from_raw(raw) is ArchiveState.ACTIVE

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("active", ArchiveState.ACTIVE),
            ("Archived", ArchiveState.ARCHIVED),
            (" ALL ", ArchiveState.ALL),
        ],
    )
    def test_case_insensitive(self, raw, expected):
        assert ArchiveState.from_raw(raw) is expected

    def test_unknown_value(self):
        with pytest.raises(ValidationError) as exc_info:
            ArchiveState.from_raw("deleted")
        assert exc_info.value.status_code == 400


class TestApply:
    def test_filters_rows(self, db_session, graph):
        graph.server.is_archived = True
        db_session.commit()

        def names(state):
            stmt = state.apply(select(Server.server_name), Server.is_archived)
            return sorted(db_session.execute(stmt).scalars())

        assert names(ArchiveState.ACTIVE) == ["srv-02"]
        assert names(ArchiveState.ARCHIVED) == ["srv-01"]
        assert names(ArchiveState.ALL) == ["srv-01", "srv-02"]

    def test_model_archive_state(self, graph):
        assert graph.server.archive_state is ArchiveState.ACTIVE
        assert "active" in repr(graph.server)
