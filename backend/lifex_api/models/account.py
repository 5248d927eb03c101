"""
Commercial Models: Account, DeploymentVariant, Project, ProjectSite, ServiceContract.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import ArchiveMixin, Base


class Account(ArchiveMixin, Base):
    """Customer account owning projects and service contracts."""

    __tablename__ = "account"

    account_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_name: Mapped[str] = mapped_column(String(150), nullable=False)
    contact_name: Mapped[Optional[str]] = mapped_column(String(100))
    contact_email: Mapped[Optional[str]] = mapped_column(String(100))
    contact_phone: Mapped[Optional[str]] = mapped_column(String(30))
    vat_number: Mapped[Optional[str]] = mapped_column(String(30))
    country: Mapped[Optional[str]] = mapped_column(String(50))


class DeploymentVariant(ArchiveMixin, Base):
    """Deployment flavour a project is built on."""

    __tablename__ = "deployment_variant"

    variant_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    variant_code: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    variant_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(100))
    # Business flag, unrelated to archiving
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Project(ArchiveMixin, Base):
    """Customer project at an address, built on a deployment variant."""

    __tablename__ = "project"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_sap_id: Mapped[Optional[str]] = mapped_column(String(50), unique=True)
    project_name: Mapped[str] = mapped_column(String(100), nullable=False)
    deployment_variant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("deployment_variant.variant_id"), nullable=False
    )
    bundle_type: Mapped[Optional[str]] = mapped_column(String(50))
    create_date: Mapped[Optional[date]] = mapped_column(Date)
    lifecycle_status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("account.account_id"), nullable=False, index=True
    )
    address_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("address.address_id"), nullable=False, index=True
    )


class ProjectSite(ArchiveMixin, Base):
    """Link table between projects and the sites they cover."""

    __tablename__ = "project_site"

    project_site_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("project.project_id"), nullable=False, index=True
    )
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("project_id", "site_id", name="uq_project_site"),
    )


class ServiceContract(ArchiveMixin, Base):
    """Service contract of an account for a project site."""

    __tablename__ = "service_contract"

    contract_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("account.account_id"), nullable=False, index=True
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("project.project_id"), nullable=False, index=True
    )
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    contract_number: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(12), nullable=False, default="Planned")
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
