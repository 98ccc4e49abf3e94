# app/schemas/upload_issue.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class UploadIssueOut(BaseModel):
    id: int
    renter_id: int
    field: str
    filename: Optional[str]
    size_bytes: Optional[int]
    reason: str
    detail: Optional[str]
    is_resolved: int
    created_at: datetime
    resolved_at: Optional[datetime]

    class Config:
        from_attributes = True
