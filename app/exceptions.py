"""
Exception types for the vehicle hire intake service.

Each carries the HTTP status it maps to, so routers can raise them and a
single handler in app.main renders the error body.
"""

from typing import Optional


class IntakeError(Exception):
    """Base class for errors that are reported to the caller as-is."""

    status_code = 400
    default_message = "Error: request could not be processed"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)


class SubmissionValidationError(IntakeError):
    """Raised when a submitted registration form is missing or has invalid fields."""

    status_code = 400
    default_message = "Invalid submission"


class InvalidStatusError(IntakeError):
    """Raised when a vehicle status outside Available/Booked/Maintenance is requested."""

    status_code = 400
    default_message = "Invalid status value"


class VehicleNotFoundError(IntakeError):
    status_code = 404
    default_message = "Vehicle not found"


class RenterNotFoundError(IntakeError):
    status_code = 404
    default_message = "Renter not found"


class VehicleUnavailableError(IntakeError):
    """Raised when the selected vehicle is Booked or in Maintenance."""

    status_code = 409
    default_message = "Vehicle is not available"


class DuplicateRegistrationError(IntakeError):
    status_code = 409
    default_message = "Registration already exists"


class UploadIssueNotFoundError(IntakeError):
    status_code = 404
    default_message = "Upload issue not found"
