# app/services/vehicle_service.py
"""
Vehicle lookup, listing and status transitions.
Used by the vehicles router and by booking_service when a booking links a car.
"""

from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import DuplicateRegistrationError, InvalidStatusError, VehicleNotFoundError
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate
from app.utils.constants import VEHICLE_STATUSES, VehicleStatus
from app.utils.logger import get_logger

logger = get_logger(__name__)


def resolve_vehicle_id(raw) -> int:
    """Vehicle ids arrive as strings from forms and paths. Anything non-numeric cannot exist."""
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise VehicleNotFoundError()


def list_available(db: Session) -> list[Vehicle]:
    """Available vehicles only, ordered by make."""
    return (
        db.query(Vehicle)
        .filter(Vehicle.status == VehicleStatus.AVAILABLE)
        .order_by(Vehicle.make.asc(), Vehicle.id.asc())
        .all()
    )


def list_vehicles(db: Session, status: Optional[str] = None) -> list[Vehicle]:
    q = db.query(Vehicle)
    if status:
        q = q.filter(Vehicle.status == status)
    return q.order_by(Vehicle.make.asc(), Vehicle.id.asc()).all()


def get_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if not vehicle:
        raise VehicleNotFoundError()
    return vehicle


def lock_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
    """Re-read a vehicle with a row lock for the rest of the transaction (no-op on SQLite)."""
    return db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()


def register_vehicle(db: Session, body: VehicleCreate) -> Vehicle:
    """Add a vehicle to the fleet. Registration must be unique."""
    existing = db.query(Vehicle).filter(Vehicle.registration == body.registration).first()
    if existing:
        raise DuplicateRegistrationError(f"Registration {body.registration} already exists", field="registration")
    vehicle = Vehicle(**body.model_dump(), status=VehicleStatus.AVAILABLE)
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    logger.info(f"[FLEET] Registered {vehicle.registration} ({vehicle.make} {vehicle.model_name})")
    return vehicle


def mark_booked(vehicle: Vehicle, renter_id: int):
    """Flip a vehicle to Booked and point it at its renter. Caller commits."""
    vehicle.status = VehicleStatus.BOOKED
    vehicle.booked_by = renter_id


def update_status(db: Session, vehicle_id, status: Optional[str]) -> Vehicle:
    """
    Set a vehicle's status. The status is checked before the lookup, so an
    invalid value is rejected without touching the row.
    """
    if status not in VEHICLE_STATUSES:
        raise InvalidStatusError(field="status")
    vehicle = get_vehicle(db, resolve_vehicle_id(vehicle_id))
    previous = vehicle.status
    vehicle.status = status
    if status == VehicleStatus.AVAILABLE:
        vehicle.booked_by = None
    db.commit()
    db.refresh(vehicle)
    logger.info(f"[FLEET] {vehicle.registration}: {previous} → {status}")
    return vehicle
