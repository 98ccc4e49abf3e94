# Vehicle Hire Intake — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.renter import Renter               # noqa
from app.models.vehicle import Vehicle             # noqa
from app.models.upload_issue import UploadIssue    # noqa
