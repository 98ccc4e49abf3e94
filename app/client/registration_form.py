# app/client/registration_form.py
"""
Registration form controller — a local, single-session client of the intake API.

Holds everything the renter has typed or attached across four steps
(client type → details → documents → booking), repeats the server's checks
before sending, and talks to the API with httpx.

Errors stay hidden until the first submit attempt. After a successful
booking the vehicle is dropped from the local picker and the form reloads
after a short delay. After a failure a generic banner is shown and the
typed values are kept for another try.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

import httpx

from app.services.media_uploader import UploadedFile
from app.utils.constants import ATTACHMENTS, ID_TYPES, ClientType
from app.utils.logger import get_logger

logger = get_logger(__name__)

STEPS = ("client_type", "details", "documents", "booking")
ERROR_BANNER = "Submission failed. Please try again."
RELOAD_DELAY_SECONDS = 1.5

TEXT_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "organization_name": "organizationName",
    "phone": "phone",
    "email": "email",
    "kra_pin": "kraPin",
    "license_number": "licenseNumber",
    "id_type": "idType",
    "id_number": "idNumber",
    "residential_address": "residentialAddress",
    "work_address": "workAddress",
    "pickup_time": "pickupTime",
    "return_time": "returnTime",
}
DATE_FIELDS = {
    "dob": "dob",
    "license_expiration": "exp",
    "pickup_date": "pickup",
    "return_date": "return",
}


@dataclass
class FormState:
    client_type: Optional[str] = None
    text: dict = field(default_factory=lambda: {name: "" for name in TEXT_FIELDS})
    dates: dict = field(default_factory=lambda: {name: None for name in DATE_FIELDS})
    files: dict = field(default_factory=dict)       # license_front → UploadedFile
    selected_vehicle: str = ""


def _combine(day: Optional[date], hhmm: str) -> Optional[datetime]:
    if day is None or not hhmm:
        return None
    try:
        hours, minutes = (int(p) for p in hhmm.split(":"))
        return datetime(day.year, day.month, day.day, hours, minutes)
    except ValueError:
        return None


class RegistrationFormController:
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None,
                 reload_delay: float = RELOAD_DELAY_SECONDS, timeout: float = 60.0):
        self.base_url = base_url.rstrip("/")
        self.reload_delay = reload_delay
        self._transport = transport
        self._timeout = timeout
        self.state = FormState()
        self.step_index = 0
        self.submit_attempted = False
        self._submitted_at: Optional[datetime] = None   # clock used by the last submit
        self.status = "idle"           # idle | submitting | success | error
        self.error_message: Optional[str] = None
        self.available_vehicles: list[dict] = []
        self._reload_task: Optional[asyncio.Task] = None

    # ── navigation ───────────────────────────────────────────────────────
    @property
    def step(self) -> str:
        return STEPS[self.step_index]

    def next_step(self) -> str:
        self.step_index = min(self.step_index + 1, len(STEPS) - 1)
        return self.step

    def previous_step(self) -> str:
        self.step_index = max(self.step_index - 1, 0)
        return self.step

    # ── input ────────────────────────────────────────────────────────────
    def choose_client_type(self, client_type: str):
        if client_type not in (ClientType.INDIVIDUAL, ClientType.CORPORATE):
            raise ValueError(f"Unknown client type: {client_type}")
        self.state.client_type = client_type

    def set_field(self, name: str, value):
        if name in TEXT_FIELDS:
            self.state.text[name] = value or ""
        elif name in DATE_FIELDS:
            self.state.dates[name] = value
        else:
            raise KeyError(name)

    def set_pickup(self, day: date, hhmm: str):
        self.state.dates["pickup_date"] = day
        self.state.text["pickup_time"] = hhmm

    def set_return(self, day: date, hhmm: str):
        self.state.dates["return_date"] = day
        self.state.text["return_time"] = hhmm

    def attach(self, name: str, filename: str, content: bytes, content_type: str = "image/jpeg"):
        if name not in ATTACHMENTS:
            raise KeyError(name)
        self.state.files[name] = UploadedFile(filename=filename, content=content, content_type=content_type)

    def select_vehicle(self, vehicle_id):
        self.state.selected_vehicle = str(vehicle_id) if vehicle_id is not None else ""

    def reset(self):
        self.state = FormState()
        self.step_index = 0
        self.submit_attempted = False
        self._submitted_at = None
        self.status = "idle"
        self.error_message = None

    # ── validation ───────────────────────────────────────────────────────
    @property
    def pickup_at(self) -> Optional[datetime]:
        return _combine(self.state.dates["pickup_date"], self.state.text["pickup_time"])

    @property
    def return_at(self) -> Optional[datetime]:
        return _combine(self.state.dates["return_date"], self.state.text["return_time"])

    def validate(self, now: Optional[datetime] = None) -> dict:
        """Field → message for every problem, regardless of submit_attempted."""
        now = now or datetime.now()
        text = {k: v.strip() for k, v in self.state.text.items()}
        errors = {}

        if self.state.client_type is None:
            errors["client_type"] = "Please choose individual or corporate"
        elif self.state.client_type == ClientType.INDIVIDUAL:
            if not text["first_name"]:
                errors["first_name"] = "First name is required"
            if not text["last_name"]:
                errors["last_name"] = "Last name is required"
        elif not text["organization_name"]:
            errors["organization_name"] = "Organization name is required"

        for name, message in (
            ("phone", "Phone number is required"),
            ("residential_address", "Residential address is required"),
            ("id_number", "ID number is required"),
            ("license_number", "License number is required"),
        ):
            if not text[name]:
                errors[name] = message
        if text["id_type"] not in ID_TYPES:
            errors["id_type"] = "ID type is required"
        if not self.state.selected_vehicle:
            errors["selected_vehicle"] = "Please select a vehicle"

        pickup, ret = self.pickup_at, self.return_at
        if pickup is None or pickup <= now:
            errors["pickup_date"] = "Pickup date & time required (future)"
        if ret is None or (pickup is not None and ret <= pickup):
            errors["return_date"] = "Return date & time required (after pickup)"
        return errors

    @property
    def errors(self) -> dict:
        """Inline errors; empty until the user has tried to submit once."""
        if not self.submit_attempted:
            return {}
        return self.validate(self._submitted_at)

    # ── wire ─────────────────────────────────────────────────────────────
    def to_multipart(self) -> tuple[dict, dict]:
        data = {"isCorporate": "true" if self.state.client_type == ClientType.CORPORATE else "false"}
        for name, wire in TEXT_FIELDS.items():
            value = self.state.text[name].strip()
            if value:
                data[wire] = value
        for name, prefix in DATE_FIELDS.items():
            day = self.state.dates[name]
            if day is not None:
                data[f"{prefix}Year"] = str(day.year)
                data[f"{prefix}Month"] = str(day.month)
                data[f"{prefix}Day"] = str(day.day)
        if self.state.selected_vehicle:
            data["selectedCar"] = self.state.selected_vehicle

        files = {}
        for name, upload in self.state.files.items():
            wire, _prefix = ATTACHMENTS[name]
            files[wire] = (upload.filename, upload.content, upload.content_type)
        return data, files

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout, transport=self._transport)

    async def load_vehicles(self) -> list[dict]:
        try:
            async with self._client() as client:
                response = await client.get("/api/v1/vehicles/available")
                response.raise_for_status()
                self.available_vehicles = response.json()
        except Exception as e:
            logger.error(f"Failed to load vehicles: {e}")
            self.available_vehicles = []
        return self.available_vehicles

    async def submit(self, now: Optional[datetime] = None) -> bool:
        self.submit_attempted = True
        self._submitted_at = now
        if self.validate(now):
            return False

        self.status = "submitting"
        self.error_message = None
        data, files = self.to_multipart()
        try:
            async with self._client() as client:
                response = await client.post("/api/v1/submit", data=data, files=files or None)
            if response.status_code >= 400:
                try:
                    detail = response.json().get("error")
                except ValueError:
                    detail = None
                raise RuntimeError(detail or f"HTTP {response.status_code}")
        except Exception as e:
            logger.error(f"Submission error: {e}")
            self.status = "error"
            self.error_message = ERROR_BANNER
            return False

        booked = self.state.selected_vehicle
        self.available_vehicles = [v for v in self.available_vehicles if str(v.get("id")) != booked]
        self.status = "success"
        self._reload_task = asyncio.create_task(self._reload_later())
        return True

    async def _reload_later(self):
        await asyncio.sleep(self.reload_delay)
        self.reset()
        await self.load_vehicles()

    async def wait_for_reload(self):
        if self._reload_task is not None:
            await self._reload_task
