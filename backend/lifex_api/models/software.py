"""
Software Models: Software catalog, InstalledSoftware, UpgradePlan.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import ArchiveMixin, Base


class Software(ArchiveMixin, Base):
    """Software release in the catalog."""

    __tablename__ = "software"

    software_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    release: Mapped[str] = mapped_column(String(20), nullable=False)
    revision: Mapped[str] = mapped_column(String(20), nullable=False, default="0")
    support_phase: Mapped[str] = mapped_column(String(10), nullable=False, default="Production")
    license_model: Mapped[Optional[str]] = mapped_column(String(50))
    third_party: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    end_of_sales_date: Mapped[Optional[date]] = mapped_column(Date)
    support_start_date: Mapped[Optional[date]] = mapped_column(Date)
    support_end_date: Mapped[Optional[date]] = mapped_column(Date)


class InstalledSoftware(ArchiveMixin, Base):
    """Software offered or installed at a site."""

    __tablename__ = "installed_software"

    installed_software_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    software_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("software.software_id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(12), nullable=False, default="Offered")
    offered_date: Mapped[Optional[date]] = mapped_column(Date)
    installed_date: Mapped[Optional[date]] = mapped_column(Date)
    rejected_date: Mapped[Optional[date]] = mapped_column(Date)
    outdated_date: Mapped[Optional[date]] = mapped_column(Date)


class UpgradePlan(ArchiveMixin, Base):
    """Planned software upgrade window for a site."""

    __tablename__ = "upgrade_plan"

    upgrade_plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    software_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("software.software_id"), nullable=False, index=True
    )
    planned_window_start: Mapped[Optional[date]] = mapped_column(Date)
    planned_window_end: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(12), nullable=False, default="Planned")
    created_by: Mapped[Optional[str]] = mapped_column(String(20))
