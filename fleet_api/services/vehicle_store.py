# fleet_api/services/vehicle_store.py
"""
Record stores for Vehicle rows.

VehicleStore is the narrow contract the registry depends on. SQLVehicleStore
backs it with a SQLAlchemy session; InMemoryVehicleStore keeps rows in a dict
for unit tests and scratch use. Stores never commit on their own: the caller
wraps each operation in transaction().
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleet_api.exceptions import DuplicatePlate, VehicleNotFound
from fleet_api.models.vehicle import Vehicle, new_vehicle_id, utcnow
from fleet_api.utils.logger import get_logger

logger = get_logger(__name__)


class VehicleStore(ABC):
    """Port interface for vehicle persistence."""

    @abstractmethod
    def count(self, status: Optional[str] = None, exclude_id: Optional[str] = None) -> int:
        """Count vehicles, optionally only those with `status` and skipping `exclude_id`."""
        raise NotImplementedError

    @abstractmethod
    def find_by_plate(self, license_plate: str) -> Optional[Vehicle]:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Vehicle]:
        """All vehicles, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, vehicle: Vehicle) -> Vehicle:
        """Persist a new vehicle; id and created_at are assigned if unset."""
        raise NotImplementedError

    @abstractmethod
    def update_by_id(self, vehicle_id: str, **fields) -> Vehicle:
        raise NotImplementedError

    @abstractmethod
    def delete_by_id(self, vehicle_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def transaction(self):
        """Context manager: commit on success, roll back on any exception."""
        raise NotImplementedError


class SQLVehicleStore(VehicleStore):
    """SQLAlchemy implementation over a request-scoped Session."""

    def __init__(self, db: Session):
        self._db = db

    def count(self, status=None, exclude_id=None) -> int:
        q = self._db.query(func.count(Vehicle.id))
        if status is not None:
            q = q.filter(Vehicle.status == status)
        if exclude_id is not None:
            q = q.filter(Vehicle.id != exclude_id)
        return q.scalar() or 0

    def find_by_plate(self, license_plate):
        return self._db.query(Vehicle).filter(Vehicle.license_plate == license_plate).first()

    def find_by_id(self, vehicle_id):
        return self._db.get(Vehicle, vehicle_id)

    def list_all(self):
        return self._db.query(Vehicle).order_by(Vehicle.created_at, Vehicle.id).all()

    def insert(self, vehicle):
        self._db.add(vehicle)
        self._flush()
        return vehicle

    def update_by_id(self, vehicle_id, **fields):
        vehicle = self.find_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound()
        for name, value in fields.items():
            setattr(vehicle, name, value)
        self._flush()
        return vehicle

    def delete_by_id(self, vehicle_id):
        vehicle = self.find_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound()
        self._db.delete(vehicle)
        self._flush()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

    def _flush(self):
        # The unique index on license_plate catches writers outside this process
        try:
            self._db.flush()
        except IntegrityError as e:
            logger.warning(f"Integrity error on vehicles table: {e.orig}")
            if is_plate_conflict(e):
                raise DuplicatePlate() from e
            raise


def is_plate_conflict(error: IntegrityError) -> bool:
    """True when the violated constraint is the unique license_plate index."""
    # PostgreSQL: duplicate key ... "ix_vehicles_license_plate"; SQLite: UNIQUE constraint failed: vehicles.license_plate
    message = str(error.orig).lower()
    return "license_plate" in message and ("unique" in message or "duplicate" in message)


class InMemoryVehicleStore(VehicleStore):
    """Dict-backed implementation for testing and development."""

    def __init__(self, vehicles: Optional[List[Vehicle]] = None):
        self._vehicles = {}
        for vehicle in vehicles or []:
            self.insert(vehicle)

    def count(self, status=None, exclude_id=None) -> int:
        return sum(
            1 for v in self._vehicles.values()
            if (status is None or v.status == status) and v.id != exclude_id
        )

    def find_by_plate(self, license_plate):
        return next((v for v in self._vehicles.values() if v.license_plate == license_plate), None)

    def find_by_id(self, vehicle_id):
        return self._vehicles.get(vehicle_id)

    def list_all(self):
        # dicts keep insertion order, which matches created_at order here
        return list(self._vehicles.values())

    def insert(self, vehicle):
        if self.find_by_plate(vehicle.license_plate) is not None:
            raise DuplicatePlate()
        if vehicle.id is None:
            vehicle.id = new_vehicle_id()
        if vehicle.created_at is None:
            vehicle.created_at = utcnow()
        self._vehicles[vehicle.id] = vehicle
        return vehicle

    def update_by_id(self, vehicle_id, **fields):
        vehicle = self.find_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound()
        plate = fields.get("license_plate")
        if plate is not None:
            other = self.find_by_plate(plate)
            if other is not None and other.id != vehicle_id:
                raise DuplicatePlate()
        for name, value in fields.items():
            setattr(vehicle, name, value)
        return vehicle

    def delete_by_id(self, vehicle_id):
        if self._vehicles.pop(vehicle_id, None) is None:
            raise VehicleNotFound()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = {vid: (v, v.license_plate, v.status) for vid, v in self._vehicles.items()}
        try:
            yield
        except Exception:
            self._vehicles = {}
            for vid, (vehicle, plate, status) in snapshot.items():
                vehicle.license_plate = plate
                vehicle.status = status
                self._vehicles[vid] = vehicle
            raise
