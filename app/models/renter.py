# app/models/renter.py
"""
Renters table — one row per accepted registration (KYC + rental period).
Rows are created by booking_service and never updated afterwards.
selected_car_id is a plain id, not a foreign key: deleting a vehicle leaves renters intact.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, Text
from app.database import Base


class Renter(Base):
    __tablename__ = "renters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    is_corporate = Column(Boolean, default=False, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    organization_name = Column(String(200))

    phone = Column(String(50), nullable=False)
    email = Column(String(200))

    id_type = Column(String(20), nullable=False)       # national_id | passport | alien_id | military_id
    id_number = Column(String(100), nullable=False)
    id_front_url = Column(String(500), default="")
    id_back_url = Column(String(500), default="")
    photo_url = Column(String(500), default="")
    kra_pin = Column(String(50))

    license_number = Column(String(100), nullable=False)
    license_front_url = Column(String(500), default="", nullable=False)
    license_expiration = Column(Date)
    dob = Column(Date)

    residential_address = Column(Text)
    work_address = Column(Text)

    pickup_date = Column(DateTime, nullable=False)
    return_date = Column(DateTime, nullable=False)
    selected_car_id = Column(Integer, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def display_name(self) -> str:
        if self.is_corporate:
            return self.organization_name or ""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<Renter {self.id} name={self.display_name!r} car={self.selected_car_id}>"
