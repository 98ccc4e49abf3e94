# app/services/booking_service.py
"""
Booking submission workflow.

  1. validate      — dates, identity and KYC fields (nothing stored on failure)
  2. vehicle check — selected car must exist and be Available (before any upload)
  3. upload        — licence / ID front / ID back / photo, concurrently
  4. persist+link  — renter row, vehicle → Booked, upload issues, one transaction

A failed upload never fails the booking: the URL is stored as "" and an
upload issue is recorded. Any failure in step 4 rolls back everything, so a
renter is never left without the vehicle it booked.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.exceptions import SubmissionValidationError, VehicleNotFoundError, VehicleUnavailableError
from app.schemas.renter import SubmissionResult
from app.services import renter_service, upload_issue_service, vehicle_service
from app.services.media_uploader import MediaUploader
from app.services.submission_parser import ParsedSubmission
from app.utils.constants import ATTACHMENTS, ID_TYPES, VehicleStatus
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _require(value: Optional[str], field: str, message: str):
    if not value or not value.strip():
        raise SubmissionValidationError(message, field=field)


def validate_submission(parsed: ParsedSubmission, now: Optional[datetime] = None):
    """Server-side checks; raises SubmissionValidationError on the first failure."""
    now = now or datetime.now()

    if not parsed.pickup_date or not parsed.return_date:
        raise SubmissionValidationError(
            "Pickup and return date/time are required",
            field="pickup_date" if not parsed.pickup_date else "return_date",
        )
    if parsed.return_date <= parsed.pickup_date:
        raise SubmissionValidationError("Return date/time must be after pickup date/time", field="return_date")
    if parsed.pickup_date <= now:
        raise SubmissionValidationError("Pickup date/time must be in the future", field="pickup_date")

    if parsed.is_corporate:
        _require(parsed.organization_name, "organization_name", "Organization name is required")
    else:
        _require(parsed.first_name, "first_name", "First name is required")
        _require(parsed.last_name, "last_name", "Last name is required")

    _require(parsed.phone, "phone", "Phone number is required")
    if parsed.id_type not in ID_TYPES:
        raise SubmissionValidationError("ID Type is required", field="id_type")
    _require(parsed.id_number, "id_number", "ID Number is required")
    _require(parsed.license_number, "license_number", "License number is required")


def check_selected_vehicle(db: Session, parsed: ParsedSubmission) -> Optional[int]:
    """Resolve the selected car id; None when no car was picked."""
    if not parsed.selected_car:
        return None
    vehicle = vehicle_service.get_vehicle(db, vehicle_service.resolve_vehicle_id(parsed.selected_car))
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise VehicleUnavailableError(f"Vehicle {vehicle.registration} is {vehicle.status}", field="selected_car")
    return vehicle.id


async def submit_booking(parsed: ParsedSubmission, db: Session, uploader: MediaUploader,
                         now: Optional[datetime] = None) -> SubmissionResult:
    validate_submission(parsed, now)
    vehicle_id = check_selected_vehicle(db, parsed)
    db.close()   # no connection held while uploads run

    outcomes = await uploader.upload_all({
        key: (parsed.attachments.get(key), prefix) for key, (_wire, prefix) in ATTACHMENTS.items()
    })

    missing = []
    try:
        renter = renter_service.build_renter(parsed, {k: o.url for k, o in outcomes.items()}, vehicle_id)
        db.add(renter)
        db.flush()   # assigns renter.id

        if vehicle_id is not None:
            vehicle = vehicle_service.lock_vehicle(db, vehicle_id)
            if vehicle is None:
                raise VehicleNotFoundError()
            if vehicle.status != VehicleStatus.AVAILABLE:
                raise VehicleUnavailableError(f"Vehicle {vehicle.registration} was booked meanwhile",
                                              field="selected_car")
            vehicle_service.mark_booked(vehicle, renter.id)

        for key, outcome in outcomes.items():
            if outcome.degraded:
                upload_issue_service.record_upload_issue(db, renter.id, key, outcome)
                missing.append(key)

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"[BOOKING] Renter {renter.id} ({renter.display_name}) registered"
        + (f", vehicle {vehicle_id} booked" if vehicle_id is not None else "")
        + (f", missing documents: {', '.join(missing)}" if missing else "")
    )
    return SubmissionResult(renter_id=renter.id, vehicle_id=vehicle_id, missing_documents=missing)
