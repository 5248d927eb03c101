"""
Location Models: Country, City, Address.

Country and City are keyed by short natural codes; every other model uses a
UUID primary key.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import ArchiveMixin, Base


class Country(ArchiveMixin, Base):
    """
    ISO 3166-1 alpha-2 country.
    Inherits: is_archived, archived_at, archived_by from ArchiveMixin.
    """

    __tablename__ = "country"

    country_code: Mapped[str] = mapped_column(String(2), primary_key=True)
    country_name: Mapped[str] = mapped_column(String(100), nullable=False)


class City(ArchiveMixin, Base):
    """City identified by a natural code (e.g. "AT-VIENNA")."""

    __tablename__ = "city"

    city_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    city_name: Mapped[str] = mapped_column(String(100), nullable=False)
    country_code: Mapped[str] = mapped_column(
        String(2), ForeignKey("country.country_code"), nullable=False, index=True
    )


class Address(ArchiveMixin, Base):
    """Street address within a city."""

    __tablename__ = "address"

    address_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    street: Mapped[str] = mapped_column(String(150), nullable=False)
    city_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("city.city_id"), nullable=False, index=True
    )
