"""
Network Design Planner - Test Configuration
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Pytest fixtures for API testing.
"""

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["NDP_LOG_LEVEL"] = "WARNING"

from netplanner.main import app
from netplanner.models.base import Base, get_db
from netplanner.models.design import NetworkDesign
from netplanner.models.equipment import Equipment, EquipmentCategory
from netplanner.models.template import ConfigType, ConfigurationTemplate

# Create test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override."""
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers() -> dict[str, str]:
    """Identity header forwarded by the identity provider for the owner."""
    return {"X-User-Id": OWNER_ID}


@pytest.fixture
def other_headers() -> dict[str, str]:
    """Identity header for a second, unrelated user."""
    return {"X-User-Id": OTHER_USER_ID}


@pytest.fixture
def sample_design(db_session: Session) -> NetworkDesign:
    """Create a design owned by OWNER_ID."""
    design = NetworkDesign(
        user_id=OWNER_ID,
        design_name="Office A",
        description="Head office network",
        requirements={
            "total_users": "1-50",
            "wired_users": 30,
            "wireless_users": 15,
            "network_segmentation": True,
            "segments": [{"name": "Staff", "type": "department", "users": 30}],
        },
    )
    db_session.add(design)
    db_session.commit()
    db_session.refresh(design)
    return design


@pytest.fixture
def sample_switch(db_session: Session) -> Equipment:
    """Create a Cisco access switch."""
    equipment = Equipment(
        name="access-sw-01",
        vendor="Cisco",
        model="C9200-24T",
        category=EquipmentCategory.SWITCH,
        management_ip="10.0.0.2",
    )
    db_session.add(equipment)
    db_session.commit()
    db_session.refresh(equipment)
    return equipment


@pytest.fixture
def vlan_template(db_session: Session) -> ConfigurationTemplate:
    """Template "vlan {{id}}" with one variable and no default."""
    template = ConfigurationTemplate(
        owner_id=OWNER_ID,
        name="Access VLAN",
        vendor="Cisco",
        model=None,
        equipment_category=EquipmentCategory.SWITCH,
        config_type=ConfigType.VLAN,
        template="vlan {{id}}",
        variables=[{"name": "id", "required": False, "data_type": "string"}],
    )
    db_session.add(template)
    db_session.commit()
    db_session.refresh(template)
    return template


@pytest.fixture
def hostname_template(db_session: Session) -> ConfigurationTemplate:
    """Template with a required variable and a defaulted one."""
    template = ConfigurationTemplate(
        owner_id=OWNER_ID,
        name="Basic Hostname",
        vendor="Cisco",
        model="C9200-24T",
        equipment_category=EquipmentCategory.SWITCH,
        config_type=ConfigType.BASIC,
        template="hostname {{hostname}}\nip domain-name {{domain}}",
        variables=[
            {"name": "hostname", "required": True, "data_type": "string"},
            {"name": "domain", "required": False, "default_value": "corp.local", "data_type": "string"},
        ],
    )
    db_session.add(template)
    db_session.commit()
    db_session.refresh(template)
    return template
