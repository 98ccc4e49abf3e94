# app/services/renter_service.py
"""Renter record construction and read-only lookups."""

from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import RenterNotFoundError
from app.models.renter import Renter
from app.services.submission_parser import ParsedSubmission


def build_renter(parsed: ParsedSubmission, urls: dict, vehicle_id: Optional[int]) -> Renter:
    """
    Map a validated submission and its upload URLs onto a Renter.
    Only the identity fields matching is_corporate are kept.
    """
    if parsed.is_corporate:
        first_name, last_name, organization_name = None, None, parsed.organization_name
    else:
        first_name, last_name, organization_name = parsed.first_name, parsed.last_name, None

    return Renter(
        is_corporate=parsed.is_corporate,
        first_name=first_name,
        last_name=last_name,
        organization_name=organization_name,
        phone=parsed.phone,
        email=parsed.email,
        kra_pin=parsed.kra_pin,
        dob=parsed.dob,
        license_number=parsed.license_number,
        license_front_url=urls.get("license_front", ""),
        license_expiration=parsed.license_expiration,
        id_type=parsed.id_type,
        id_number=parsed.id_number,
        id_front_url=urls.get("id_front", ""),
        id_back_url=urls.get("id_back", ""),
        photo_url=urls.get("photo", ""),
        residential_address=parsed.residential_address,
        work_address=parsed.work_address,
        pickup_date=parsed.pickup_date,
        return_date=parsed.return_date,
        selected_car_id=vehicle_id,
    )


def get_renter(db: Session, renter_id: int) -> Renter:
    renter = db.query(Renter).filter(Renter.id == renter_id).first()
    if not renter:
        raise RenterNotFoundError()
    return renter


def list_renters(db: Session, limit: int = 50) -> list[Renter]:
    return db.query(Renter).order_by(Renter.created_at.desc(), Renter.id.desc()).limit(limit).all()
