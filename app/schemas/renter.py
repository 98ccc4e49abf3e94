# app/schemas/renter.py
from pydantic import BaseModel
from datetime import datetime, date
from typing import Optional


class RenterOut(BaseModel):
    id: int
    is_corporate: bool
    first_name: Optional[str]
    last_name: Optional[str]
    organization_name: Optional[str]
    phone: str
    email: Optional[str]
    id_type: str
    id_number: str
    id_front_url: Optional[str]
    id_back_url: Optional[str]
    photo_url: Optional[str]
    kra_pin: Optional[str]
    license_number: str
    license_front_url: str
    license_expiration: Optional[date]
    dob: Optional[date]
    residential_address: Optional[str]
    work_address: Optional[str]
    pickup_date: datetime
    return_date: datetime
    selected_car_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionResult(BaseModel):
    success: bool = True
    renter_id: int
    vehicle_id: Optional[int] = None
    missing_documents: list[str] = []
