# app/services/submission_parser.py
"""
Turns the multipart registration form into a ParsedSubmission.

Wire format (camelCase, as sent by the form client):
  text:   isCorporate, firstName, lastName, organizationName, phone, email, kraPin,
          licenseNumber, idType, idNumber, residentialAddress, workAddress, selectedCar
  dates:  dobYear/dobMonth/dobDay, expYear/expMonth/expDay,
          pickupYear/pickupMonth/pickupDay + pickupTime (HH:MM),
          returnYear/returnMonth/returnDay + returnTime (HH:MM)
  files:  licenseFront, idFront, idBack, photo

A date counts as present only when all three parts are sent.
Malformed parts raise SubmissionValidationError naming the field.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Mapping, Optional

from app.config import settings
from app.exceptions import SubmissionValidationError
from app.services.media_uploader import UploadedFile
from app.utils.constants import ATTACHMENTS
from app.utils.logger import get_logger

logger = get_logger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass
class ParsedSubmission:
    is_corporate: bool
    phone: Optional[str]
    id_type: Optional[str]
    id_number: Optional[str]
    license_number: Optional[str]
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    organization_name: Optional[str] = None
    email: Optional[str] = None
    kra_pin: Optional[str] = None
    residential_address: Optional[str] = None
    work_address: Optional[str] = None
    dob: Optional[date] = None
    license_expiration: Optional[date] = None
    pickup_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    selected_car: Optional[str] = None       # raw id as sent; resolved by booking_service
    attachments: dict = field(default_factory=dict)   # license_front → UploadedFile | None


def _text(form: Mapping, name: str) -> Optional[str]:
    value = form.get(name)
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_date_parts(form: Mapping, prefix: str, field_name: str) -> Optional[date]:
    """Read `{prefix}Year/Month/Day`. Returns None unless all three are present."""
    parts = [_text(form, f"{prefix}{suffix}") for suffix in ("Year", "Month", "Day")]
    if not all(parts):
        return None
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        raise SubmissionValidationError(f"Invalid {field_name.replace('_', ' ')}", field=field_name)


def combine_time(day: Optional[date], hhmm: Optional[str], field_name: str) -> Optional[datetime]:
    """Attach an `HH:MM` time to a date; midnight when no time is given."""
    if day is None:
        return None
    if not hhmm:
        return datetime.combine(day, time(0, 0))
    match = _TIME_RE.match(hhmm)
    if not match:
        raise SubmissionValidationError(f"Invalid {field_name.replace('_', ' ')} time", field=field_name)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise SubmissionValidationError(f"Invalid {field_name.replace('_', ' ')} time", field=field_name)
    return datetime.combine(day, time(hours, minutes))


def parse_submission(form: Mapping) -> ParsedSubmission:
    """Parse text and date fields. Attachments are filled in by read_attachments()."""
    pickup_day = parse_date_parts(form, "pickup", "pickup_date")
    return_day = parse_date_parts(form, "return", "return_date")

    parsed = ParsedSubmission(
        is_corporate=_text(form, "isCorporate") == "true",
        first_name=_text(form, "firstName"),
        last_name=_text(form, "lastName"),
        organization_name=_text(form, "organizationName"),
        phone=_text(form, "phone"),
        email=_text(form, "email"),
        kra_pin=_text(form, "kraPin"),
        license_number=_text(form, "licenseNumber"),
        id_type=_text(form, "idType"),
        id_number=_text(form, "idNumber"),
        residential_address=_text(form, "residentialAddress"),
        work_address=_text(form, "workAddress"),
        selected_car=_text(form, "selectedCar"),
        dob=parse_date_parts(form, "dob", "dob"),
        license_expiration=parse_date_parts(form, "exp", "license_expiration"),
        pickup_date=combine_time(pickup_day, _text(form, "pickupTime"), "pickup_date"),
        return_date=combine_time(return_day, _text(form, "returnTime"), "return_date"),
    )
    logger.debug(
        f"Parsed submission: corporate={parsed.is_corporate} car={parsed.selected_car} "
        f"pickup={parsed.pickup_date} return={parsed.return_date}"
    )
    return parsed


async def read_attachments(form: Mapping, max_bytes: int = settings.MAX_UPLOAD_BYTES) -> dict:
    """
    Read the four file fields into UploadedFile objects (None when not sent).

    At most max_bytes + 1 bytes are read per part. A part that is larger keeps
    its size but no content, so the uploader rejects it without buffering it.
    """
    files = {}
    for key, (wire_name, _prefix) in ATTACHMENTS.items():
        upload = form.get(wire_name)
        if upload is None or isinstance(upload, str):
            files[key] = None
            continue
        filename = upload.filename or ""
        content_type = upload.content_type or "application/octet-stream"
        declared = getattr(upload, "size", None)
        if declared is not None and declared > max_bytes:
            files[key] = UploadedFile(filename, b"", content_type, size_bytes=declared)
            continue

        content = await upload.read(max_bytes + 1)
        if len(content) > max_bytes:
            files[key] = UploadedFile(filename, b"", content_type, size_bytes=max(len(content), declared or 0))
            continue
        files[key] = UploadedFile(filename=filename, content=content, content_type=content_type)
    return files
