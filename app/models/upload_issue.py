# app/models/upload_issue.py
"""
Upload issues table — one row per KYC attachment that degraded to an empty URL
(too large, media host error). Lets operators chase missing documents after intake.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class UploadIssue(Base):
    __tablename__ = "upload_issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    renter_id = Column(Integer, nullable=False, index=True)
    field = Column(String(50), nullable=False)          # license_front | id_front | id_back | photo
    filename = Column(String(255))
    size_bytes = Column(Integer)
    reason = Column(String(50), nullable=False, index=True)
    detail = Column(Text)
    is_resolved = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
    resolved_at = Column(DateTime)

    def __repr__(self):
        return f"<UploadIssue {self.id} renter={self.renter_id} field={self.field} reason={self.reason}>"
