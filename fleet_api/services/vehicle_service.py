# fleet_api/services/vehicle_service.py
"""
Vehicle registry: the business rules around the vehicles table.

Rules enforced on every write:
  - license plates are 1–20 characters and unique (exact, case-sensitive)
  - at most MAINTENANCE_CAP_PERCENT of the fleet is in Maintenance
    (create counts the new vehicle in the total; update leaves the total as is)
  - Maintenance only transitions to Available
  - only Available vehicles can be deleted

Counts are always re-read from the store, never cached. Writes are serialised
by a process-wide lock and each one runs inside a single store transaction, so
the read-then-write checks cannot interleave within one worker process.
"""

import threading
from contextlib import contextmanager
from typing import List, Optional

from fleet_api.config import settings
from fleet_api.exceptions import (
    DeleteBlocked,
    DuplicatePlate,
    IllegalTransition,
    InvalidPlate,
    InvalidStatus,
    MaintenanceCapExceeded,
    VehicleNotFound,
    VehicleRegistryError,
)
from fleet_api.models.vehicle import MAX_PLATE_LENGTH, Vehicle, VehicleStatus, is_allowed_transition
from fleet_api.services.vehicle_store import VehicleStore
from fleet_api.utils.logger import get_logger

logger = get_logger(__name__)

# Shared by every registry instance (one per request)
_write_lock = threading.Lock()

_VALID_STATUSES = ", ".join(s.value for s in VehicleStatus)


def validate_plate(license_plate) -> str:
    if not isinstance(license_plate, str) or not license_plate:
        raise InvalidPlate("License plate is required.")
    if len(license_plate) > MAX_PLATE_LENGTH:
        raise InvalidPlate(f"License plate cannot exceed {MAX_PLATE_LENGTH} characters.")
    return license_plate


def parse_status(value, default: Optional[VehicleStatus] = None) -> VehicleStatus:
    """Map a raw status value onto VehicleStatus. None falls back to `default`."""
    if value is None:
        if default is None:
            raise InvalidStatus("Status is required.")
        return default
    try:
        return VehicleStatus(value)
    except ValueError:
        raise InvalidStatus(f"Invalid status '{value}'. Must be one of: {_VALID_STATUSES}.") from None


class VehicleRegistry:
    def __init__(self, store: VehicleStore, cap_percent: Optional[int] = None):
        self.store = store
        self.cap_percent = settings.MAINTENANCE_CAP_PERCENT if cap_percent is None else cap_percent

    def maintenance_cap(self, total: int) -> int:
        """floor(cap_percent% of total), in integer arithmetic."""
        return total * self.cap_percent // 100

    # ── Reads ─────────────────────────────────────────────────────────────
    def list_vehicles(self) -> List[Vehicle]:
        return self.store.list_all()

    def get(self, vehicle_id: str) -> Vehicle:
        vehicle = self.store.find_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound()
        return vehicle

    def summary(self) -> dict:
        """Per-status counts plus the maintenance cap for the current fleet size."""
        total = self.store.count()
        counts = {s.value: self.store.count(status=s.value) for s in VehicleStatus}
        return {
            "total": total,
            "byStatus": counts,
            "maintenanceCap": self.maintenance_cap(total),
        }

    # ── Writes ────────────────────────────────────────────────────────────
    def create(self, license_plate, status=None) -> Vehicle:
        with self._write("create"):
            validate_plate(license_plate)
            target = parse_status(status, default=VehicleStatus.AVAILABLE)

            if self.store.find_by_plate(license_plate) is not None:
                raise DuplicatePlate()

            if target is VehicleStatus.MAINTENANCE:
                in_maintenance = self.store.count(status=VehicleStatus.MAINTENANCE.value)
                total = self.store.count()
                # The new vehicle counts toward the total as well
                if in_maintenance + 1 > self.maintenance_cap(total + 1):
                    raise MaintenanceCapExceeded()

            vehicle = self.store.insert(Vehicle(license_plate=license_plate, status=target.value))

        logger.info(f"[Fleet] Created {vehicle.id} plate={license_plate} status={target.value}")
        return vehicle

    def update(self, vehicle_id: str, license_plate, status) -> Vehicle:
        with self._write("update"):
            validate_plate(license_plate)
            target = parse_status(status)

            vehicle = self.store.find_by_id(vehicle_id)
            if vehicle is None:
                raise VehicleNotFound()

            if license_plate != vehicle.license_plate:
                other = self.store.find_by_plate(license_plate)
                if other is not None and other.id != vehicle.id:
                    raise DuplicatePlate()

            current = VehicleStatus(vehicle.status)
            if not is_allowed_transition(current, target):
                raise IllegalTransition()

            if target is VehicleStatus.MAINTENANCE:
                in_maintenance = self.store.count(
                    status=VehicleStatus.MAINTENANCE.value, exclude_id=vehicle.id
                )
                total = self.store.count()
                if in_maintenance + 1 > self.maintenance_cap(total):
                    raise MaintenanceCapExceeded()

            vehicle = self.store.update_by_id(vehicle_id, license_plate=license_plate, status=target.value)

        logger.info(f"[Fleet] Updated {vehicle_id} plate={license_plate} status={current.value}->{target.value}")
        return vehicle

    def delete(self, vehicle_id: str) -> None:
        with self._write("delete"):
            vehicle = self.store.find_by_id(vehicle_id)
            if vehicle is None:
                raise VehicleNotFound()
            if vehicle.status != VehicleStatus.AVAILABLE.value:
                raise DeleteBlocked()
            self.store.delete_by_id(vehicle_id)

        logger.info(f"[Fleet] Deleted {vehicle_id}")

    @contextmanager
    def _write(self, operation: str):
        with _write_lock:
            try:
                with self.store.transaction():
                    yield
            except VehicleRegistryError as exc:
                logger.warning(f"[Fleet] {operation} rejected: {exc.message}")
                raise
