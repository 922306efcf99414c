# fleet_api/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class VehicleCreate(BaseModel):
    license_plate: Optional[str] = Field(None, alias="licensePlate")
    status: Optional[str] = None     # Available | InUse | Maintenance; defaults to Available

    class Config:
        populate_by_name = True


class VehicleUpdate(BaseModel):
    license_plate: Optional[str] = Field(None, alias="licensePlate")
    status: Optional[str] = None

    class Config:
        populate_by_name = True


class VehicleOut(BaseModel):
    id: str
    license_plate: str = Field(alias="licensePlate")
    status: str
    created_at: datetime = Field(alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class FleetSummary(BaseModel):
    total: int
    by_status: dict[str, int] = Field(alias="byStatus")
    maintenance_cap: int = Field(alias="maintenanceCap")

    class Config:
        populate_by_name = True
