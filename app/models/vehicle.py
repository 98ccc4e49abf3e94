# app/models/vehicle.py
"""
Vehicles table — the hire fleet.
Rows are created out of band (seed script or POST /vehicles).
The booking workflow only moves status to Booked and sets booked_by.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Float, JSON
from app.database import Base
from app.utils.constants import VehicleStatus


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    make = Column(String(100), nullable=False, index=True)
    model_name = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    registration = Column(String(50), unique=True, nullable=False, index=True)
    seats = Column(Integer, nullable=False)
    transmission = Column(String(20), nullable=False)  # Automatic | Manual
    fuel_type = Column(String(20), nullable=False)     # Petrol | Diesel | Hybrid | Electric
    color = Column(String(50), nullable=False)
    daily_price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default=VehicleStatus.AVAILABLE, index=True)
    main_image_url = Column(String(500))
    gallery_images = Column(JSON, default=list)
    booked_by = Column(Integer, index=True)             # Renter id, no cascade

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Vehicle {self.registration} {self.make} {self.model_name} status={self.status}>"
