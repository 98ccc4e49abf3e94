# app/routers/vehicles.py
"""Fleet endpoints — available listing for the form, status changes and registration for operators."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle import AvailableVehicleOut, VehicleCreate, VehicleOut, VehicleStatusUpdate
from app.services import vehicle_service

router = APIRouter()


@router.get("/vehicles/available", response_model=list[AvailableVehicleOut],
            summary="Vehicles that can be booked")
def list_available_vehicles(db: Session = Depends(get_db)):
    """Status Available only, sorted by make."""
    return vehicle_service.list_available(db)


@router.get("/vehicles", response_model=list[VehicleOut], summary="List the fleet")
def list_vehicles(status: Optional[str] = None, db: Session = Depends(get_db)):
    return vehicle_service.list_vehicles(db, status)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_service.resolve_vehicle_id(vehicle_id))


@router.post("/vehicles", status_code=201, response_model=VehicleOut, summary="Register a vehicle")
def register_vehicle(body: VehicleCreate, db: Session = Depends(get_db)):
    return vehicle_service.register_vehicle(db, body)


@router.patch("/vehicles/{vehicle_id}/status", summary="Set a vehicle's status")
def update_vehicle_status(vehicle_id: str, body: VehicleStatusUpdate, db: Session = Depends(get_db)):
    """
    status must be Available, Booked or Maintenance (400 otherwise, row untouched).
    Unknown vehicle → 404. Setting Available clears booked_by.
    """
    vehicle = vehicle_service.update_status(db, vehicle_id, body.status)
    return {"success": True, "vehicle": VehicleOut.model_validate(vehicle)}
