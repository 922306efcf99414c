# tests/conftest.py
"""Shared fixtures. Points the app at an in-memory SQLite DB before it is imported."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_FILE"] = ""
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "fleet-api-test-logs"))

from datetime import datetime, timedelta, timezone

import pytest
from fleet_api.database import Base, SessionLocal, engine, create_tables
from fleet_api.models.vehicle import Vehicle, VehicleStatus
from fleet_api.services.vehicle_service import VehicleRegistry
from fleet_api.services.vehicle_store import InMemoryVehicleStore

_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_vehicles(available=0, in_use=0, maintenance=0, prefix="V"):
    """Build unsaved vehicles with distinct plates and increasing created_at."""
    statuses = (
        [VehicleStatus.AVAILABLE] * available
        + [VehicleStatus.IN_USE] * in_use
        + [VehicleStatus.MAINTENANCE] * maintenance
    )
    return [
        Vehicle(license_plate=f"{prefix}-{i:04d}", status=s.value, created_at=_EPOCH + timedelta(seconds=i))
        for i, s in enumerate(statuses)
    ]


@pytest.fixture
def store():
    return InMemoryVehicleStore()


@pytest.fixture
def registry(store):
    return VehicleRegistry(store, cap_percent=5)


@pytest.fixture
def db_session():
    create_tables()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient
    from fleet_api.main import app

    return TestClient(app)
