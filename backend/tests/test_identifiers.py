"""
Tests for identifier parsing and coercion.
"""

import uuid

import pytest
from hypothesis import given, settings, strategies as st

from lifex_api.services.archive import REGISTRY, CodeKey, UuidKey, coerce, parse, to_raw
from shared.utils.exceptions import InvalidIdentifierFormatError


SITE = REGISTRY.resolve("site")
COUNTRY = REGISTRY.resolve("country")
CITY = REGISTRY.resolve("city")


class TestParse:
    """parse() turns caller text into the entity's key kind or fails."""

    def test_uuid_entity(self):
        raw = "3f2b8c1e-6d0a-4e3b-9a52-1c7d9e0f4a61"
        identifier = parse(SITE, raw)
        assert identifier == UuidKey(uuid.UUID(raw))
        assert str(identifier) == raw

    def test_uuid_surrounding_whitespace_is_ignored(self):
        raw = "3f2b8c1e-6d0a-4e3b-9a52-1c7d9e0f4a61"
        assert parse(SITE, f"  {raw}\n") == UuidKey(uuid.UUID(raw))

    def test_code_entity_is_trimmed(self):
        assert parse(CITY, " AT-VIENNA ") == CodeKey("AT-VIENNA")

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_rejected(self, raw):
        with pytest.raises(InvalidIdentifierFormatError) as exc_info:
            parse(SITE, raw)
        assert exc_info.value.status_code == 400
        assert "must not be blank" in exc_info.value.detail

    def test_malformed_uuid_is_rejected(self):
        with pytest.raises(InvalidIdentifierFormatError) as exc_info:
            parse(SITE, "not-a-uuid")
        assert exc_info.value.detail == "Invalid UUID for Site: not-a-uuid"

    def test_code_too_long_is_rejected(self):
        with pytest.raises(InvalidIdentifierFormatError):
            parse(COUNTRY, "X" * 51)


class TestCoerce:
    """coerce() maps stored values to identifiers and never raises."""

    def test_none(self):
        assert coerce(SITE, None) is None

    def test_uuid_value(self):
        value = uuid.uuid4()
        assert coerce(SITE, value) == UuidKey(value)

    def test_uuid_bytes(self):
        value = uuid.uuid4()
        assert coerce(SITE, value.bytes) == UuidKey(value)

    def test_uuid_text(self):
        value = uuid.uuid4()
        assert coerce(SITE, str(value)) == UuidKey(value)

    def test_garbage_for_uuid_entity(self):
        assert coerce(SITE, "AT-VIENNA") is None

    def test_code_value(self):
        assert coerce(COUNTRY, "AT") == CodeKey("AT")

    def test_blank_code(self):
        assert coerce(COUNTRY, "  ") is None

    def test_identifier_of_same_kind_passes_through(self):
        key = CodeKey("AT")
        assert coerce(COUNTRY, key) is key

    def test_identifier_of_other_kind_is_converted(self):
        value = uuid.uuid4()
        assert coerce(COUNTRY, UuidKey(value)) == CodeKey(str(value))


class TestToRaw:
    def test_uuid(self):
        value = uuid.uuid4()
        assert to_raw(UuidKey(value)) == value

    def test_code(self):
        assert to_raw(CodeKey("AT")) == "AT"


class TestIdentifierProperties:
    """Property-based checks over arbitrary input."""

    @given(value=st.uuids())
    def test_uuid_text_parses_to_same_value(self, value):
        assert to_raw(parse(SITE, str(value))) == value

    @given(text=st.text(max_size=80))
    @settings(max_examples=200)
    def test_parse_only_raises_format_error(self, text):
        for entity in (SITE, COUNTRY):
            try:
                identifier = parse(entity, text)
            except InvalidIdentifierFormatError:
                continue
            assert identifier.kind is entity.key_kind

    @given(text=st.text(min_size=1, max_size=50).filter(lambda t: t.strip()))
    def test_code_parse_and_coerce_agree(self, text):
        assert coerce(COUNTRY, text) == parse(COUNTRY, text)

    @given(value=st.one_of(st.none(), st.integers(), st.text(), st.binary(), st.uuids()))
    def test_coerce_is_total(self, value):
        for entity in (SITE, CITY):
            result = coerce(entity, value)
            assert result is None or result.kind is entity.key_kind
