"""
Site Models: Site and the equipment installed there
(Server, Clients, Radio, AudioDevice, PhoneIntegration).
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import ArchiveMixin, Base


class Site(ArchiveMixin, Base):
    """Physical site of a project."""

    __tablename__ = "site"

    site_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    site_name: Mapped[str] = mapped_column(String(100), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("project.project_id"), nullable=False, index=True
    )
    address_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("address.address_id"), nullable=False, index=True
    )
    fire_zone: Mapped[Optional[str]] = mapped_column(String(50))
    tenant_count: Mapped[Optional[int]] = mapped_column(Integer)


class Server(ArchiveMixin, Base):
    """Server installed at a site."""

    __tablename__ = "server"

    server_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    server_name: Mapped[str] = mapped_column(String(100), nullable=False)
    server_brand: Mapped[Optional[str]] = mapped_column(String(50))
    server_serial_nr: Mapped[Optional[str]] = mapped_column(String(100))
    server_os: Mapped[Optional[str]] = mapped_column(String(100))
    patch_level: Mapped[Optional[str]] = mapped_column(String(50))
    virtual_platform: Mapped[Optional[str]] = mapped_column(String(20))
    high_availability: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Clients(ArchiveMixin, Base):
    """Client workstation ("working position") at a site."""

    __tablename__ = "clients"

    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    client_name: Mapped[str] = mapped_column(String(100), nullable=False)
    client_brand: Mapped[Optional[str]] = mapped_column(String(50))
    client_serial_nr: Mapped[Optional[str]] = mapped_column(String(100))
    client_os: Mapped[Optional[str]] = mapped_column(String(100))
    install_type: Mapped[str] = mapped_column(String(20), nullable=False, default="LOCAL")


class Radio(ArchiveMixin, Base):
    """Radio at a site, optionally assigned to a client workstation."""

    __tablename__ = "radio"

    radio_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    assigned_client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("clients.client_id"), nullable=True, index=True
    )
    radio_brand: Mapped[Optional[str]] = mapped_column(String(50))
    radio_serial_nr: Mapped[Optional[str]] = mapped_column(String(100))
    mode: Mapped[str] = mapped_column(String(10), nullable=False, default="Digital")
    digital_standard: Mapped[Optional[str]] = mapped_column(String(20))


class AudioDevice(ArchiveMixin, Base):
    """Headset, speaker or microphone attached to a client workstation."""

    __tablename__ = "audio_device"

    audio_device_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.client_id"), nullable=False, index=True
    )
    audio_device_brand: Mapped[Optional[str]] = mapped_column(String(50))
    device_serial_nr: Mapped[Optional[str]] = mapped_column(String(100))
    audio_device_firmware: Mapped[Optional[str]] = mapped_column(String(50))
    device_type: Mapped[str] = mapped_column(String(10), nullable=False, default="HEADSET")


class PhoneIntegration(ArchiveMixin, Base):
    """Phone system integration at a site."""

    __tablename__ = "phone_integration"

    phone_integration_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.site_id"), nullable=False, index=True
    )
    phone_type: Mapped[str] = mapped_column(String(20), nullable=False, default="Emergency")
    phone_brand: Mapped[Optional[str]] = mapped_column(String(50))
    phone_serial_nr: Mapped[Optional[str]] = mapped_column(String(100))
    phone_firmware: Mapped[Optional[str]] = mapped_column(String(50))
