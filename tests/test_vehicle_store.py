# tests/test_vehicle_store.py
"""Unit tests for the SQLAlchemy and in-memory vehicle stores."""

from unittest.mock import MagicMock

import pytest
from conftest import make_vehicles
from sqlalchemy.exc import IntegrityError
from fleet_api.exceptions import DuplicatePlate, VehicleNotFound
from fleet_api.models.vehicle import Vehicle
from fleet_api.services.vehicle_store import InMemoryVehicleStore, SQLVehicleStore


class TestSQLVehicleStore:
    def test_insert_assigns_id_and_timestamp(self, db_session):
        store = SQLVehicleStore(db_session)
        with store.transaction():
            vehicle = store.insert(Vehicle(license_plate="ABC123"))
        assert len(vehicle.id) == 36
        assert vehicle.created_at is not None
        assert vehicle.status == "Available"

    def test_count_filters(self, db_session):
        store = SQLVehicleStore(db_session)
        with store.transaction():
            for v in make_vehicles(available=3, in_use=2, maintenance=1):
                store.insert(v)
        in_maintenance = store.find_by_plate("V-0005")

        assert store.count() == 6
        assert store.count(status="InUse") == 2
        assert store.count(status="Maintenance") == 1
        assert store.count(status="Maintenance", exclude_id=in_maintenance.id) == 0

    def test_find_by_plate_is_exact(self, db_session):
        store = SQLVehicleStore(db_session)
        with store.transaction():
            store.insert(Vehicle(license_plate="abc"))
        assert store.find_by_plate("abc") is not None
        assert store.find_by_plate("ABC") is None

    def test_list_all_oldest_first(self, db_session):
        store = SQLVehicleStore(db_session)
        vehicles = make_vehicles(available=3)
        with store.transaction():
            for v in reversed(vehicles):
                store.insert(v)
        assert [v.license_plate for v in store.list_all()] == ["V-0000", "V-0001", "V-0002"]

    def test_update_and_delete(self, db_session):
        store = SQLVehicleStore(db_session)
        with store.transaction():
            vehicle = store.insert(Vehicle(license_plate="OLD"))
        with store.transaction():
            store.update_by_id(vehicle.id, license_plate="NEW", status="InUse")
        assert store.find_by_id(vehicle.id).license_plate == "NEW"

        with store.transaction():
            store.delete_by_id(vehicle.id)
        assert store.find_by_id(vehicle.id) is None
        with pytest.raises(VehicleNotFound):
            store.delete_by_id(vehicle.id)

    def test_unique_index_reports_duplicate(self, db_session):
        store = SQLVehicleStore(db_session)
        with store.transaction():
            store.insert(Vehicle(license_plate="DUP-001"))
        with pytest.raises(DuplicatePlate):
            with store.transaction():
                store.insert(Vehicle(license_plate="DUP-001"))
        assert store.count() == 1

    def test_transaction_rolls_back_on_error(self, db_session):
        store = SQLVehicleStore(db_session)
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.insert(Vehicle(license_plate="GONE"))
                raise RuntimeError("boom")
        assert store.count() == 0

    def test_integrity_error_mapped_and_rolled_back(self):
        db = MagicMock()
        db.flush.side_effect = IntegrityError("INSERT", {}, Exception('duplicate key value violates unique constraint "ix_vehicles_license_plate"'))
        store = SQLVehicleStore(db)

        with pytest.raises(DuplicatePlate):
            with store.transaction():
                store.insert(Vehicle(license_plate="X"))

        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_not_null_violation_is_not_a_duplicate(self, db_session):
        store = SQLVehicleStore(db_session)
        with pytest.raises(IntegrityError, match="NOT NULL"):
            with store.transaction():
                store.insert(Vehicle(license_plate=None))
        assert store.count() == 0

    def test_status_outside_enum_rejected_by_database(self, db_session):
        store = SQLVehicleStore(db_session)
        with pytest.raises(IntegrityError, match="ck_vehicles_status"):
            with store.transaction():
                store.insert(Vehicle(license_plate="BAD-1", status="Broken"))
        assert store.count() == 0

    def test_other_integrity_errors_propagate(self):
        db = MagicMock()
        db.flush.side_effect = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: vehicles.status"))
        store = SQLVehicleStore(db)

        with pytest.raises(IntegrityError):
            with store.transaction():
                store.insert(Vehicle(license_plate="X"))

        db.rollback.assert_called_once()


class TestInMemoryVehicleStore:
    def test_insert_and_lookup(self):
        store = InMemoryVehicleStore()
        vehicle = store.insert(Vehicle(license_plate="MEM-1", status="InUse"))
        assert store.find_by_id(vehicle.id) is vehicle
        assert store.find_by_plate("MEM-1") is vehicle
        assert store.count(status="InUse") == 1

    def test_duplicate_insert(self):
        store = InMemoryVehicleStore(make_vehicles(available=1))
        with pytest.raises(DuplicatePlate):
            store.insert(Vehicle(license_plate="V-0000"))

    def test_rollback_restores_rows(self):
        store = InMemoryVehicleStore(make_vehicles(available=2))
        first, second = store.list_all()

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.update_by_id(first.id, license_plate="CHANGED", status="InUse")
                store.delete_by_id(second.id)
                raise RuntimeError("boom")

        assert [v.license_plate for v in store.list_all()] == ["V-0000", "V-0001"]
        assert first.status == "Available"
