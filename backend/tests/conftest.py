"""
Pytest configuration and fixtures for backend tests.
"""

import os

# The application engine is created at import time; point it at SQLite
# before anything from lifex_api or shared is imported.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lifex_api.main import app
from lifex_api.models import (
    Account, Address, AudioDevice, Base, City, Clients, Country, DeploymentVariant,
    InstalledSoftware, Project, ProjectSite, Radio, Server, ServiceContract, Site, Software,
)
from shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock(now):
    """Clock returning the same instant for every call."""
    return lambda: now


def _add(db_session, obj):
    db_session.add(obj)
    db_session.flush()
    return obj


@pytest.fixture
def graph(db_session):
    """
    Seed a small but complete entity graph.

    Country(AT) -> City(AT-VIENNA) -> Address -> Project -> Site -> equipment,
    with Address also referenced directly by Site (a diamond), a second site
    under the same project, and shared reference data (Account, Software)
    that archiving a site must not touch.
    """
    country = _add(db_session, Country(country_code="AT", country_name="Austria"))
    city = _add(db_session, City(city_id="AT-VIENNA", city_name="Vienna", country_code="AT"))
    address = _add(db_session, Address(street="Ringstrasse 1", city_id=city.city_id))
    account = _add(db_session, Account(account_name="Wiener Leitstelle"))
    variant = _add(db_session, DeploymentVariant(variant_code="ONPREM", variant_name="On premise"))
    project = _add(
        db_session,
        Project(
            project_name="Vienna Dispatch",
            account_id=account.account_id,
            address_id=address.address_id,
            deployment_variant_id=variant.variant_id,
        ),
    )
    site = _add(
        db_session,
        Site(site_name="Main Control Room", project_id=project.project_id, address_id=address.address_id),
    )
    other_site = _add(
        db_session,
        Site(site_name="Backup Room", project_id=project.project_id, address_id=address.address_id),
    )
    server = _add(db_session, Server(server_name="srv-01", site_id=site.site_id))
    other_server = _add(db_session, Server(server_name="srv-02", site_id=other_site.site_id))
    workstation = _add(db_session, Clients(client_name="wp-01", site_id=site.site_id))
    headset = _add(db_session, AudioDevice(client_id=workstation.client_id))
    radio = _add(db_session, Radio(site_id=site.site_id, assigned_client_id=workstation.client_id))
    software = _add(db_session, Software(name="LifeX Core", release="7.2"))
    installed = _add(
        db_session, InstalledSoftware(site_id=site.site_id, software_id=software.software_id)
    )
    project_site = _add(db_session, ProjectSite(project_id=project.project_id, site_id=site.site_id))
    contract = _add(
        db_session,
        ServiceContract(
            account_id=account.account_id,
            project_id=project.project_id,
            site_id=site.site_id,
            contract_number="SC-2024-001",
        ),
    )
    db_session.commit()

    return SimpleNamespace(
        country=country,
        city=city,
        address=address,
        account=account,
        variant=variant,
        project=project,
        site=site,
        other_site=other_site,
        server=server,
        other_server=other_server,
        workstation=workstation,
        headset=headset,
        radio=radio,
        software=software,
        installed=installed,
        project_site=project_site,
        contract=contract,
    )
