# scripts/setup/seed_vehicles.py
"""
Load the demo fleet. Vehicles are never created by the booking workflow,
so a fresh install needs this (or POST /api/v1/vehicles) before the form has anything to offer.
Existing registrations are left alone, so it is safe to re-run.

Usage: python scripts/setup/seed_vehicles.py [--reset-status]
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import SessionLocal, create_tables
from app.models.vehicle import Vehicle
from app.utils.constants import VehicleStatus
from app.utils.logger import get_logger

logger = get_logger(__name__)

FLEET = [
    {"make": "Toyota", "model_name": "Axio", "year": 2016, "registration": "KDA 101A", "seats": 5,
     "transmission": "Automatic", "fuel_type": "Petrol", "color": "Silver", "daily_price": 3500},
    {"make": "Toyota", "model_name": "Land Cruiser Prado", "year": 2019, "registration": "KDK 202B", "seats": 7,
     "transmission": "Automatic", "fuel_type": "Diesel", "color": "Black", "daily_price": 12000},
    {"make": "Mazda", "model_name": "Demio", "year": 2017, "registration": "KDB 303C", "seats": 5,
     "transmission": "Automatic", "fuel_type": "Petrol", "color": "Red", "daily_price": 3000},
    {"make": "Nissan", "model_name": "X-Trail", "year": 2018, "registration": "KDH 404D", "seats": 7,
     "transmission": "Automatic", "fuel_type": "Hybrid", "color": "White", "daily_price": 7000},
    {"make": "Subaru", "model_name": "Forester", "year": 2015, "registration": "KCZ 505E", "seats": 5,
     "transmission": "Manual", "fuel_type": "Petrol", "color": "Blue", "daily_price": 6000},
]


def main():
    parser = argparse.ArgumentParser(description="Seed the vehicle fleet")
    parser.add_argument("--reset-status", action="store_true",
                        help="Put every seeded vehicle back to Available")
    args = parser.parse_args()

    create_tables()
    db = SessionLocal()
    try:
        added = 0
        for entry in FLEET:
            vehicle = db.query(Vehicle).filter(Vehicle.registration == entry["registration"]).first()
            if vehicle is None:
                db.add(Vehicle(**entry, status=VehicleStatus.AVAILABLE))
                added += 1
            elif args.reset_status:
                vehicle.status = VehicleStatus.AVAILABLE
                vehicle.booked_by = None
        db.commit()
        logger.info(f"Seeded {added} new vehicle(s), {len(FLEET) - added} already present")
    finally:
        db.close()


if __name__ == "__main__":
    main()
