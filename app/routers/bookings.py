# app/routers/bookings.py
"""
Registration + booking endpoint.
POST /submit — multipart KYC form with up to four image attachments.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from sqlalchemy.orm import Session
from app.database import get_db
from app.exceptions import IntakeError, SubmissionValidationError
from app.schemas.renter import SubmissionResult
from app.services.booking_service import submit_booking
from app.services.media_uploader import MediaUploader, get_media_uploader
from app.services.submission_parser import parse_submission, read_attachments
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/submit", status_code=201, response_model=SubmissionResult,
             summary="Submit a registration and book the selected vehicle")
async def submit_registration(request: Request, db: Session = Depends(get_db),
                              uploader: MediaUploader = Depends(get_media_uploader)):
    """
    400 on a malformed body or invalid fields or dates, 404 for an unknown
    vehicle, 409 when the vehicle is no longer Available, 500 for anything
    unexpected.
    Re-submitting the same form creates a second renter.
    """
    try:
        form = await request.form()
    except (HTTPException, MultiPartException, KeyError) as e:
        logger.warning(f"Malformed form data: {e!r}")
        raise SubmissionValidationError("Malformed form data")

    try:
        logger.info(f"Submission from {request.client.host if request.client else 'unknown'} | "
                    f"{len(form)} fields")
        parsed = parse_submission(form)
        parsed.attachments = await read_attachments(form, uploader.max_bytes)
        return await submit_booking(parsed, db, uploader)

    except IntakeError:
        raise
    except Exception as e:
        logger.error(f"Form processing error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": "Submission failed"})
