# app/services/upload_issue_service.py
"""
Records KYC attachments that degraded to an empty URL.
Used by booking_service; rows are written in the booking's own transaction.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from app.exceptions import UploadIssueNotFoundError
from app.models.upload_issue import UploadIssue
from app.services.media_uploader import UploadOutcome
from app.utils.logger import get_logger

logger = get_logger(__name__)


def record_upload_issue(db: Session, renter_id: int, field: str, outcome: UploadOutcome) -> UploadIssue:
    """Stage an upload issue row. The caller commits."""
    issue = UploadIssue(
        renter_id=renter_id,
        field=field,
        filename=outcome.filename,
        size_bytes=outcome.size_bytes,
        reason=outcome.reason,
        detail=outcome.detail,
        is_resolved=0,
        created_at=datetime.utcnow(),
    )
    db.add(issue)
    logger.warning(
        f"[KYC] Renter {renter_id} is missing {field} ({outcome.reason})",
        extra={"renter_id": renter_id, "attachment": field, "reason": outcome.reason,
               "size_bytes": outcome.size_bytes},
    )
    return issue


def resolve_upload_issue(db: Session, issue_id: int) -> UploadIssue:
    issue = db.query(UploadIssue).filter(UploadIssue.id == issue_id).first()
    if not issue:
        raise UploadIssueNotFoundError()
    issue.is_resolved = 1
    issue.resolved_at = datetime.utcnow()
    db.commit()
    return issue
