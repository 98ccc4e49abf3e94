"""Unit tests for the registration form controller (client side)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from datetime import date, datetime, timedelta
from app.client.registration_form import ERROR_BANNER, RegistrationFormController

NOW = datetime(2030, 1, 10, 9, 0)
VEHICLES = [
    {"id": 1, "make": "Mazda", "model_name": "Demio", "year": 2017, "daily_price": 3000.0},
    {"id": 2, "make": "Toyota", "model_name": "Axio", "year": 2016, "daily_price": 3500.0},
]


class FakeBackend:
    """Minimal stand-in for the intake API."""

    def __init__(self, submit_status=201):
        self.submit_status = submit_status
        self.requests = []
        self.vehicles = list(VEHICLES)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/v1/vehicles/available":
            return httpx.Response(200, json=self.vehicles)
        if request.url.path == "/api/v1/submit":
            if self.submit_status >= 400:
                return httpx.Response(self.submit_status, json={"success": False, "error": "Submission failed"})
            return httpx.Response(201, json={"success": True, "renter_id": 1, "vehicle_id": 2,
                                             "missing_documents": []})
        return httpx.Response(404)

    @property
    def submits(self):
        return [r for r in self.requests if r.url.path == "/api/v1/submit"]


def filled_form(backend, client_type="individual"):
    form = RegistrationFormController("http://intake.test", transport=httpx.MockTransport(backend),
                                      reload_delay=0)
    form.choose_client_type(client_type)
    if client_type == "individual":
        form.set_field("first_name", "Jane")
        form.set_field("last_name", "Wanjiru")
    else:
        form.set_field("organization_name", "Acme Logistics")
    form.set_field("phone", "+254700000001")
    form.set_field("residential_address", "Kilimani, Nairobi")
    form.set_field("id_type", "passport")
    form.set_field("id_number", "A1234567")
    form.set_field("license_number", "DL-998877")
    form.set_pickup(date(2030, 1, 12), "10:00")
    form.set_return(date(2030, 1, 15), "10:30")
    form.select_vehicle(2)
    return form


class TestNavigation:
    def test_steps_are_bounded(self):
        form = RegistrationFormController("http://intake.test")
        assert form.step == "client_type"
        assert form.previous_step() == "client_type"
        assert [form.next_step() for _ in range(4)] == ["details", "documents", "booking", "booking"]

    def test_unknown_field(self):
        form = RegistrationFormController("http://intake.test")
        with pytest.raises(KeyError):
            form.set_field("favourite_colour", "blue")
        with pytest.raises(KeyError):
            form.attach("passport_scan", "a.jpg", b"x")
        with pytest.raises(ValueError):
            form.choose_client_type("government")


class TestValidation:
    def test_errors_hidden_until_submit_attempted(self):
        form = RegistrationFormController("http://intake.test")
        assert form.validate(NOW)
        assert form.errors == {}

    @pytest.mark.asyncio
    async def test_invalid_submit_sends_nothing(self):
        backend = FakeBackend()
        form = filled_form(backend)
        form.set_field("phone", "   ")

        assert await form.submit(now=NOW) is False
        assert form.submit_attempted is True
        assert "phone" in form.errors
        assert backend.submits == []

    @pytest.mark.asyncio
    async def test_errors_use_the_clock_given_to_submit(self):
        backend = FakeBackend()
        form = filled_form(backend)
        later = datetime(2030, 1, 13, 9, 0)   # after the 2030-01-12 pickup

        assert await form.submit(now=later) is False
        assert set(form.errors) == {"pickup_date"}
        assert backend.submits == []

    def test_valid_form(self):
        assert filled_form(FakeBackend()).validate(NOW) == {}

    def test_return_must_follow_pickup(self):
        form = filled_form(FakeBackend())
        form.set_return(date(2030, 1, 12), "09:00")
        assert set(form.validate(NOW)) == {"return_date"}

    def test_pickup_must_be_future(self):
        form = filled_form(FakeBackend())
        form.set_pickup(date(2030, 1, 10), "08:00")
        assert "pickup_date" in form.validate(NOW)

    def test_time_required(self):
        form = filled_form(FakeBackend())
        form.set_pickup(date(2030, 1, 12), "")
        assert "pickup_date" in form.validate(NOW)

    def test_corporate_needs_organization(self):
        form = filled_form(FakeBackend(), client_type="corporate")
        assert form.validate(NOW) == {}
        form.set_field("organization_name", "")
        assert set(form.validate(NOW)) == {"organization_name"}


class TestWireFormat:
    def test_dates_are_split_and_flags_set(self):
        form = filled_form(FakeBackend(), client_type="corporate")
        form.set_field("dob", date(1990, 4, 9))
        form.attach("license_front", "licence.jpg", b"jpg-bytes")
        data, files = form.to_multipart()

        assert data["isCorporate"] == "true"
        assert (data["pickupYear"], data["pickupMonth"], data["pickupDay"]) == ("2030", "1", "12")
        assert data["pickupTime"] == "10:00"
        assert data["returnTime"] == "10:30"
        assert (data["dobYear"], data["dobMonth"], data["dobDay"]) == ("1990", "4", "9")
        assert data["selectedCar"] == "2"
        assert "email" not in data
        assert files == {"licenseFront": ("licence.jpg", b"jpg-bytes", "image/jpeg")}


class TestSubmit:
    @pytest.mark.asyncio
    async def test_success_removes_vehicle_then_reloads(self):
        backend = FakeBackend()
        form = filled_form(backend)
        await form.load_vehicles()
        assert [v["id"] for v in form.available_vehicles] == [1, 2]

        assert await form.submit(now=NOW) is True
        assert form.status == "success"
        assert [v["id"] for v in form.available_vehicles] == [1]
        assert len(backend.submits) == 1
        assert b"Wanjiru" in backend.submits[0].content

        backend.vehicles = [VEHICLES[0]]
        await form.wait_for_reload()
        assert form.status == "idle"
        assert form.submit_attempted is False
        assert form.state.text["first_name"] == ""
        assert [v["id"] for v in form.available_vehicles] == [1]

    @pytest.mark.asyncio
    async def test_failure_keeps_state_for_retry(self):
        backend = FakeBackend(submit_status=500)
        form = filled_form(backend)
        await form.load_vehicles()

        assert await form.submit(now=NOW) is False
        assert form.status == "error"
        assert form.error_message == ERROR_BANNER
        assert form.state.text["first_name"] == "Jane"
        assert len(form.available_vehicles) == 2

        backend.submit_status = 201
        assert await form.submit(now=NOW) is True

    @pytest.mark.asyncio
    async def test_vehicle_load_failure_leaves_empty_list(self):
        def down(request):
            raise httpx.ConnectError("refused", request=request)

        form = RegistrationFormController("http://intake.test", transport=httpx.MockTransport(down))
        assert await form.load_vehicles() == []
