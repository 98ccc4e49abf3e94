# app/utils/constants.py
"""
Enumerated values shared by models, services, routers and the form client.
Stored as plain strings in the database.
"""


class VehicleStatus:
    AVAILABLE = "Available"
    BOOKED = "Booked"
    MAINTENANCE = "Maintenance"


VEHICLE_STATUSES = (VehicleStatus.AVAILABLE, VehicleStatus.BOOKED, VehicleStatus.MAINTENANCE)

ID_TYPES = ("national_id", "passport", "alien_id", "military_id")


class ClientType:
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


# Attachment field → (multipart field name, upload name prefix)
ATTACHMENTS = {
    "license_front": ("licenseFront", "license-front"),
    "id_front": ("idFront", "id-front"),
    "id_back": ("idBack", "id-back"),
    "photo": ("photo", "photo"),
}


class UploadIssueReason:
    TOO_LARGE = "too_large"
    UPLOAD_FAILED = "upload_failed"
    NO_URL = "no_url"
    NOT_CONFIGURED = "not_configured"
