"""
Typed primary keys for archivable entities.

Every entity is keyed either by an opaque UUID or by a short natural code
(country and city). ``Identifier`` is the tagged union of the two, and the
functions here are the only place raw values cross into it:

- ``parse`` turns caller text into an Identifier and fails loudly.
- ``coerce`` turns a stored foreign-key value into an Identifier for a
  *different* entity type and returns None when that is not possible, so a
  dangling or mistyped reference is skipped instead of aborting a cascade.
- ``to_raw`` gives back the value bound into SQL.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Union

from shared.config.constants import Limits
from shared.utils.exceptions import InvalidIdentifierFormatError

if TYPE_CHECKING:
    from .registry import EntityType


class KeyKind(str, Enum):
    """Primary-key representation of an entity type."""

    UUID = "UUID"
    CODE = "CODE"


@dataclass(frozen=True)
class UuidKey:
    value: uuid.UUID
    kind: ClassVar[KeyKind] = KeyKind.UUID

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CodeKey:
    value: str
    kind: ClassVar[KeyKind] = KeyKind.CODE

    def __str__(self) -> str:
        return self.value


Identifier = Union[UuidKey, CodeKey]


def parse(entity: "EntityType", raw: str | None) -> Identifier:
    """
    Parse caller-supplied text into the entity's key kind.

    Raises:
        InvalidIdentifierFormatError: blank text, malformed UUID, or a code
            longer than the column allows.
    """
    if raw is None or not str(raw).strip():
        raise InvalidIdentifierFormatError(entity.name, raw, entity.key_kind.value)

    text = str(raw).strip()
    if entity.key_kind is KeyKind.CODE:
        if len(text) > Limits.MAX_CODE_LENGTH:
            raise InvalidIdentifierFormatError(entity.name, raw, "code")
        return CodeKey(text)

    try:
        return UuidKey(uuid.UUID(text))
    except ValueError:
        raise InvalidIdentifierFormatError(entity.name, raw, "UUID") from None


def coerce(entity: "EntityType", value: Any) -> Identifier | None:
    """
    Interpret a stored value (or an Identifier of another kind) as a key of ``entity``.

    Returns None instead of raising when the value cannot be coerced.
    """
    if value is None:
        return None

    if isinstance(value, (UuidKey, CodeKey)):
        if value.kind is entity.key_kind:
            return value
        value = value.value

    if entity.key_kind is KeyKind.CODE:
        text = str(value).strip()
        if not text or len(text) > Limits.MAX_CODE_LENGTH:
            return None
        return CodeKey(text)

    if isinstance(value, uuid.UUID):
        return UuidKey(value)
    if isinstance(value, bytes) and len(value) == 16:
        return UuidKey(uuid.UUID(bytes=value))
    try:
        return UuidKey(uuid.UUID(str(value).strip()))
    except ValueError:
        return None


def to_raw(identifier: Identifier) -> uuid.UUID | str:
    """Value bound into SQL for this identifier."""
    return identifier.value
