# fleet_api/models/vehicle.py
"""
Fleet vehicles table.
One row per vehicle, identified by an opaque UUID and a unique license plate.
Status values and the allowed status transitions are defined here too.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, String, DateTime
from fleet_api.database import Base

MAX_PLATE_LENGTH = 20


class VehicleStatus(str, Enum):
    AVAILABLE = "Available"
    IN_USE = "InUse"
    MAINTENANCE = "Maintenance"


# Maintenance is exit-only: a vehicle leaves it by becoming Available again
ALLOWED_TRANSITIONS = {
    VehicleStatus.AVAILABLE: frozenset(VehicleStatus),
    VehicleStatus.IN_USE: frozenset(VehicleStatus),
    VehicleStatus.MAINTENANCE: frozenset({VehicleStatus.AVAILABLE}),
}


def is_allowed_transition(current: VehicleStatus, target: VehicleStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def new_vehicle_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=new_vehicle_id)
    license_plate = Column(String(MAX_PLATE_LENGTH), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=VehicleStatus.AVAILABLE.value, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{s.value}'" for s in VehicleStatus)),
            name="ck_vehicles_status",
        ),
    )

    def __repr__(self):
        return f"<Vehicle {self.id} plate={self.license_plate} status={self.status}>"
