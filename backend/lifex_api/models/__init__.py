"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, ArchiveMixin, ArchiveState
- location: Country, City, Address
- account: Account, DeploymentVariant, Project, ProjectSite, ServiceContract
- site: Site, Server, Clients, Radio, AudioDevice, PhoneIntegration
- software: Software, InstalledSoftware, UpgradePlan

Usage:
    from lifex_api.models import Base, Site, ArchiveState
"""

from .base import ArchiveMixin, ArchiveState, Base
from .location import Address, City, Country
from .account import Account, DeploymentVariant, Project, ProjectSite, ServiceContract
from .site import AudioDevice, Clients, PhoneIntegration, Radio, Server, Site
from .software import InstalledSoftware, Software, UpgradePlan

__all__ = [
    # Base
    "Base",
    "ArchiveMixin",
    "ArchiveState",
    # Location
    "Country",
    "City",
    "Address",
    # Commercial
    "Account",
    "DeploymentVariant",
    "Project",
    "ProjectSite",
    "ServiceContract",
    # Site
    "Site",
    "Server",
    "Clients",
    "Radio",
    "AudioDevice",
    "PhoneIntegration",
    # Software
    "Software",
    "InstalledSoftware",
    "UpgradePlan",
]
