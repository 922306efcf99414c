# scripts/setup/seed_db.py
"""
Seed an empty fleet from a JSON file.
Entries go through the same rules as the API; rejected rows are reported and skipped.
Usage: python scripts/setup/seed_db.py [path/to/vehicles.json]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from fleet_api.database import SessionLocal, create_tables
from fleet_api.config import settings
from fleet_api.services.seed_service import load_seed_file, seed_vehicles
from fleet_api.services.vehicle_service import VehicleRegistry
from fleet_api.services.vehicle_store import SQLVehicleStore

DEFAULT_SEED_FILE = os.path.join(os.path.dirname(__file__), "vehicles.example.json")


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else (settings.SEED_FILE or DEFAULT_SEED_FILE)
    print(f"Seeding fleet from {path}")

    create_tables()
    entries = load_seed_file(path)
    db = SessionLocal()
    try:
        inserted = seed_vehicles(VehicleRegistry(SQLVehicleStore(db)), entries)
    finally:
        db.close()

    print(f"Inserted {inserted} of {len(entries)} vehicles")


if __name__ == "__main__":
    main()
