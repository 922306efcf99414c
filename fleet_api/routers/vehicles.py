# fleet_api/routers/vehicles.py
"""
Fleet vehicles: CRUD over the vehicle registry.
Business-rule rejections raise VehicleRegistryError subclasses; the handler in
main.py turns them into {"error": message} with status 400 or 404.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fleet_api.database import get_db
from fleet_api.schemas.vehicle import FleetSummary, VehicleCreate, VehicleOut, VehicleUpdate
from fleet_api.services.vehicle_service import VehicleRegistry
from fleet_api.services.vehicle_store import SQLVehicleStore

router = APIRouter()


def get_registry(db: Session = Depends(get_db)) -> VehicleRegistry:
    return VehicleRegistry(SQLVehicleStore(db))


@router.get("/vehicles", response_model=list[VehicleOut], summary="List all vehicles")
def list_vehicles(registry: VehicleRegistry = Depends(get_registry)):
    return registry.list_vehicles()


@router.get("/vehicles/summary", response_model=FleetSummary, summary="Fleet counts per status")
def fleet_summary(registry: VehicleRegistry = Depends(get_registry)):
    """Totals per status and how many vehicles may currently be in Maintenance."""
    return registry.summary()


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get one vehicle")
def get_vehicle(vehicle_id: str, registry: VehicleRegistry = Depends(get_registry)):
    return registry.get(vehicle_id)


@router.post("/vehicles", response_model=VehicleOut, summary="Register a new vehicle")
def create_vehicle(body: VehicleCreate, registry: VehicleRegistry = Depends(get_registry)):
    """Status defaults to Available. Entering Maintenance is subject to the fleet cap."""
    return registry.create(body.license_plate, body.status)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update plate and status")
def update_vehicle(vehicle_id: str, body: VehicleUpdate, registry: VehicleRegistry = Depends(get_registry)):
    return registry.update(vehicle_id, body.license_plate, body.status)


@router.delete("/vehicles/{vehicle_id}", summary="Remove an Available vehicle")
def delete_vehicle(vehicle_id: str, registry: VehicleRegistry = Depends(get_registry)):
    registry.delete(vehicle_id)
    return {"success": True}
