# app/routers/upload_issues.py
"""Missing KYC documents — list + resolve endpoints."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.upload_issue import UploadIssue
from app.schemas.upload_issue import UploadIssueOut
from app.services.upload_issue_service import resolve_upload_issue

router = APIRouter()


@router.get("/upload-issues", response_model=list[UploadIssueOut], summary="Attachments that did not upload")
def get_upload_issues(
    renter_id: Optional[int] = None,
    reason: Optional[str] = None,
    is_resolved: Optional[int] = None,
    limit: int = 50,
    db: Session = Depends(get_db),
):
    """Newest first. Filter by renter_id, reason or is_resolved (0 or 1)."""
    q = db.query(UploadIssue)
    if renter_id is not None:
        q = q.filter(UploadIssue.renter_id == renter_id)
    if reason:
        q = q.filter(UploadIssue.reason == reason)
    if is_resolved is not None:
        q = q.filter(UploadIssue.is_resolved == is_resolved)
    return q.order_by(UploadIssue.created_at.desc()).limit(limit).all()


@router.put("/upload-issues/{issue_id}/resolve", summary="Mark a missing document as handled")
def resolve_issue(issue_id: int, db: Session = Depends(get_db)):
    resolve_upload_issue(db, issue_id)
    return {"id": issue_id, "status": "resolved"}
