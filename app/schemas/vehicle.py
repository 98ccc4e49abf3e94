# app/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Literal


class VehicleCreate(BaseModel):
    make: str
    model_name: str
    year: int = Field(..., ge=1980, le=2100)
    registration: str
    seats: int = Field(..., ge=1, le=60)
    transmission: Literal["Automatic", "Manual"]
    fuel_type: Literal["Petrol", "Diesel", "Hybrid", "Electric"]
    color: str
    daily_price: float = Field(..., ge=0)
    main_image_url: Optional[str] = None
    gallery_images: list[str] = Field(default_factory=list)


class VehicleOut(BaseModel):
    id: int
    make: str
    model_name: str
    year: int
    registration: str
    seats: int
    transmission: str
    fuel_type: str
    color: str
    daily_price: float
    status: str
    main_image_url: Optional[str]
    gallery_images: Optional[list[str]]
    booked_by: Optional[int]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class AvailableVehicleOut(BaseModel):
    """Projection used by the registration form's vehicle picker."""
    id: int
    make: str
    model_name: str
    year: int
    daily_price: float

    class Config:
        from_attributes = True


class VehicleStatusUpdate(BaseModel):
    # Checked against VEHICLE_STATUSES in vehicle_service so bad values give 400, not 422
    status: Optional[str] = None
