# tests/conftest.py
"""Shared fixtures: throwaway SQLite database, mocked media host, API client."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
_DB_FILE = os.path.join(tempfile.gettempdir(), f"vehicle_hire_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["API_KEY"] = ""
os.environ["IMAGEKIT_PRIVATE_KEY"] = ""
os.environ["IMAGEKIT_URL_ENDPOINT"] = ""

from datetime import date, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, create_tables, engine
from app.main import app
from app.models.vehicle import Vehicle
from app.services.media_uploader import MediaUploader, get_media_uploader

UPLOAD_URL = "https://upload.imagekit.io/api/v1/files/upload"


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    create_tables()
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def media_calls():
    """Every request that reached the (mocked) media host."""
    return []


@pytest.fixture
def uploader(media_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        media_calls.append(request)
        return httpx.Response(200, json={"url": f"https://ik.imagekit.io/demo/kyc/file-{len(media_calls)}.jpg"})

    return MediaUploader(
        private_key="private_test_key",
        url_endpoint="https://ik.imagekit.io/demo",
        upload_url=UPLOAD_URL,
        folder="/kyc",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def client(db, uploader):
    app.dependency_overrides[get_media_uploader] = lambda: uploader
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_vehicle(db, registration="KDA 001A", status="Available", make="Toyota", **overrides):
    fields = dict(
        make=make, model_name="Axio", year=2018, registration=registration, seats=5,
        transmission="Automatic", fuel_type="Petrol", color="Silver", daily_price=3500.0,
        status=status,
    )
    fields.update(overrides)
    vehicle = Vehicle(**fields)
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


def form_fields(days_ahead=5, **overrides):
    """A valid individual submission; pass a field as None to drop it."""
    start = date.today() + timedelta(days=days_ahead)
    end = start + timedelta(days=3)
    fields = {
        "isCorporate": "false",
        "firstName": "Jane",
        "lastName": "Wanjiru",
        "phone": "+254700000001",
        "email": "jane@example.com",
        "idType": "national_id",
        "idNumber": " 12345678 ",
        "licenseNumber": "DL-998877",
        "residentialAddress": "Kilimani, Nairobi",
        "pickupYear": str(start.year), "pickupMonth": str(start.month), "pickupDay": str(start.day),
        "pickupTime": "10:00",
        "returnYear": str(end.year), "returnMonth": str(end.month), "returnDay": str(end.day),
        "returnTime": "10:00",
    }
    fields.update(overrides)
    return {k: v for k, v in fields.items() if v is not None}
