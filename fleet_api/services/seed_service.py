# fleet_api/services/seed_service.py
"""
Initial fleet loading from a JSON file.
Only seeds an empty fleet. Every entry goes through the registry, so rows that
break a fleet rule (duplicate plate, maintenance cap, ...) are logged and skipped.

File format: [{"licensePlate": "ABC123", "status": "Available"}, ...]
"""

import json

from fleet_api.exceptions import VehicleRegistryError
from fleet_api.services.vehicle_service import VehicleRegistry
from fleet_api.utils.logger import get_logger

logger = get_logger(__name__)


def load_seed_file(path: str) -> list:
    with open(path, encoding="utf-8") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise ValueError(f"Seed file {path} must contain a JSON array")
    return entries


def seed_vehicles(registry: VehicleRegistry, entries: list) -> int:
    """Create each entry through the registry. Returns how many were inserted."""
    total = registry.store.count()
    if total > 0:
        logger.info(f"Vehicles already exist ({total} entries), skipping seed.")
        return 0

    inserted = 0
    for entry in entries:
        if not isinstance(entry, dict):
            logger.error(f"Skipping malformed seed entry: {entry!r}")
            continue
        plate = entry.get("licensePlate")
        try:
            registry.create(plate, entry.get("status"))
            inserted += 1
        except VehicleRegistryError as e:
            logger.error(f"Failed to insert {plate}: {e.message}")

    logger.info(f"Seeded {inserted}/{len(entries)} vehicles")
    return inserted
