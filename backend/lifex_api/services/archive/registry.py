"""
Entity Graph Registry.

Immutable, process-wide catalog of every archivable entity type: canonical
name, table, primary key, key kind, and the foreign-key edges the cascade
engine walks.

The graph is declared once in ``build_registry()``. Only parent references
(foreign keys an entity holds) are declared; child references are derived
as their exact inverse, so the two directions can never drift apart. An
entity type missing here is invisible to archive/restore even though its
table exists.

Usage:
    from lifex_api.services.archive.registry import REGISTRY

    site = REGISTRY.resolve("Site")
    REGISTRY.supports("workingposition")   # True
    REGISTRY.canonical_name("phones")      # "PhoneIntegration"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence

from shared.config.constants import Limits
from shared.utils.exceptions import UnknownEntityTypeError

from .identifiers import KeyKind


def normalize_alias(alias: str | None) -> str:
    """Trimmed, lower-cased alias used as the lookup key."""
    return "" if alias is None else alias.strip().lower()


@dataclass(frozen=True)
class ParentRef:
    """``fk_column`` on the declaring entity holds the id of ``parent``."""

    parent: str
    fk_column: str


@dataclass(frozen=True)
class ChildRef:
    """``fk_column`` on ``child`` holds the id of the declaring entity."""

    child: str
    fk_column: str


@dataclass(frozen=True)
class EntityType:
    """An archivable record kind and its edges in the cascade graph."""

    name: str
    table: str
    pk: str
    key_kind: KeyKind
    aliases: tuple[str, ...] = ()
    parents: tuple[ParentRef, ...] = ()
    children: tuple[ChildRef, ...] = ()

    def __str__(self) -> str:
        return self.name


class EntityRegistry:
    """
    Read-only alias -> EntityType lookup.

    Edges reference other entity types by canonical name; resolution is
    case-insensitive and accepts every declared alias plus the table name.
    """

    def __init__(self, entity_types: Sequence[EntityType]):
        by_alias: dict[str, EntityType] = {}
        for entity in entity_types:
            for alias in (entity.name, entity.table, *entity.aliases):
                key = normalize_alias(alias)
                existing = by_alias.get(key)
                if existing is not None and existing is not entity:
                    raise ValueError(
                        f"Alias '{alias}' registered for both {existing.name} and {entity.name}"
                    )
                by_alias[key] = entity

        self._types: tuple[EntityType, ...] = tuple(entity_types)
        self._by_alias: Mapping[str, EntityType] = MappingProxyType(by_alias)

    def resolve(self, alias: str | None) -> EntityType:
        """
        Look up an entity type by alias.

        Raises:
            UnknownEntityTypeError: alias is not registered.
        """
        entity = self._lookup(alias)
        if entity is None:
            raise UnknownEntityTypeError(alias)
        return entity

    def supports(self, alias: str | None) -> bool:
        return self._lookup(alias) is not None

    def canonical_name(self, alias: str | None) -> str:
        """Stable name used in audit and log records."""
        return self.resolve(alias).name

    def entity_types(self) -> tuple[EntityType, ...]:
        """Distinct entity types in declaration order."""
        return self._types

    def aliases(self) -> Mapping[str, EntityType]:
        return self._by_alias

    def _lookup(self, alias: str | None) -> EntityType | None:
        key = normalize_alias(alias)
        if not key or len(key) > Limits.MAX_ALIAS_LENGTH:
            return None
        return self._by_alias.get(key)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and self.supports(alias)

    def __iter__(self) -> Iterator[EntityType]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


# =============================================================================
# Registration
# =============================================================================


@dataclass
class _Declaration:
    name: str
    table: str
    pk: str
    key_kind: KeyKind
    aliases: tuple[str, ...]
    parents: list[ParentRef] = field(default_factory=list)


class RegistryBuilder:
    """
    Collects entity declarations and freezes them into an EntityRegistry.

    ``build()`` derives child references from the declared parents and
    rejects edges that point at undeclared entities.
    """

    def __init__(self) -> None:
        self._declarations: dict[str, _Declaration] = {}

    def entity(
        self,
        name: str,
        table: str,
        pk: str,
        key_kind: KeyKind = KeyKind.UUID,
        aliases: Sequence[str] = (),
    ) -> "RegistryBuilder":
        if name in self._declarations:
            raise ValueError(f"Entity type {name} declared twice")
        self._declarations[name] = _Declaration(name, table, pk, key_kind, tuple(aliases))
        return self

    def parents(self, name: str, *refs: tuple[str, str]) -> "RegistryBuilder":
        """Declare ``(parent name, fk column on name)`` edges."""
        declaration = self._declarations[name]
        declaration.parents.extend(ParentRef(parent, fk_column) for parent, fk_column in refs)
        return self

    def build(self) -> EntityRegistry:
        children: dict[str, list[ChildRef]] = {name: [] for name in self._declarations}
        for declaration in self._declarations.values():
            for ref in declaration.parents:
                if ref.parent not in self._declarations:
                    raise ValueError(
                        f"{declaration.name}.{ref.fk_column} references undeclared entity {ref.parent}"
                    )
                children[ref.parent].append(ChildRef(declaration.name, ref.fk_column))

        return EntityRegistry([
            EntityType(
                name=declaration.name,
                table=declaration.table,
                pk=declaration.pk,
                key_kind=declaration.key_kind,
                aliases=declaration.aliases,
                parents=tuple(declaration.parents),
                children=tuple(children[declaration.name]),
            )
            for declaration in self._declarations.values()
        ])


def build_registry() -> EntityRegistry:
    """Declare the LifeX entity graph. Must mirror the ORM schema in lifex_api.models."""
    builder = RegistryBuilder()

    (builder
        .entity("Country", "country", "country_code", KeyKind.CODE, ["country"])
        .entity("City", "city", "city_id", KeyKind.CODE, ["city"])
        .entity("Address", "address", "address_id", aliases=["address"])
        .entity("Account", "account", "account_id", aliases=["account"])
        .entity("DeploymentVariant", "deployment_variant", "variant_id",
                aliases=["deploymentvariant", "variant"])
        .entity("Project", "project", "project_id", aliases=["project"])
        .entity("Site", "site", "site_id", aliases=["site"])
        .entity("Clients", "clients", "client_id",
                aliases=["clients", "client", "workingposition"])
        .entity("AudioDevice", "audio_device", "audio_device_id",
                aliases=["audiodevice", "audio"])
        .entity("Radio", "radio", "radio_id", aliases=["radio"])
        .entity("Server", "server", "server_id", aliases=["server"])
        .entity("PhoneIntegration", "phone_integration", "phone_integration_id",
                aliases=["phoneintegration", "phone", "phones"])
        .entity("Software", "software", "software_id", aliases=["software"])
        .entity("InstalledSoftware", "installed_software", "installed_software_id",
                aliases=["installedsoftware"])
        .entity("UpgradePlan", "upgrade_plan", "upgrade_plan_id", aliases=["upgradeplan"])
        .entity("ServiceContract", "service_contract", "contract_id",
                aliases=["servicecontract"])
        .entity("ProjectSite", "project_site", "project_site_id", aliases=["projectsite"]))

    (builder
        .parents("City", ("Country", "country_code"))
        .parents("Address", ("City", "city_id"))
        .parents("Project",
                 ("Account", "account_id"),
                 ("Address", "address_id"),
                 ("DeploymentVariant", "deployment_variant_id"))
        .parents("Site", ("Project", "project_id"), ("Address", "address_id"))
        .parents("Clients", ("Site", "site_id"))
        .parents("AudioDevice", ("Clients", "client_id"))
        .parents("Radio", ("Site", "site_id"), ("Clients", "assigned_client_id"))
        .parents("Server", ("Site", "site_id"))
        .parents("PhoneIntegration", ("Site", "site_id"))
        .parents("InstalledSoftware", ("Site", "site_id"), ("Software", "software_id"))
        .parents("UpgradePlan", ("Site", "site_id"), ("Software", "software_id"))
        .parents("ServiceContract",
                 ("Account", "account_id"),
                 ("Project", "project_id"),
                 ("Site", "site_id"))
        .parents("ProjectSite", ("Project", "project_id"), ("Site", "site_id")))

    return builder.build()


# Built once at import; never mutated afterwards
REGISTRY = build_registry()
