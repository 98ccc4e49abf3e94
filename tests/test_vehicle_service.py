"""Unit tests for vehicle status transitions."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from app.exceptions import InvalidStatusError, VehicleNotFoundError
from app.services.vehicle_service import mark_booked, resolve_vehicle_id, update_status


class TestUpdateStatus:
    def test_unknown_status_rejected_before_lookup(self):
        db = MagicMock()
        with pytest.raises(InvalidStatusError):
            update_status(db, "1", "Scrapped")
        db.query.assert_not_called()
        db.commit.assert_not_called()

    def test_missing_status_rejected(self):
        with pytest.raises(InvalidStatusError):
            update_status(MagicMock(), "1", None)

    def test_unknown_vehicle(self):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        with pytest.raises(VehicleNotFoundError):
            update_status(db, "99", "Booked")

    def test_maintenance_keeps_booked_by(self):
        vehicle = MagicMock(status="Booked", booked_by=7)
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = vehicle

        update_status(db, "1", "Maintenance")
        assert vehicle.status == "Maintenance"
        assert vehicle.booked_by == 7
        db.commit.assert_called_once()

    def test_available_clears_booked_by(self):
        vehicle = MagicMock(status="Booked", booked_by=7)
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = vehicle

        update_status(db, "1", "Available")
        assert vehicle.status == "Available"
        assert vehicle.booked_by is None


class TestHelpers:
    def test_mark_booked(self):
        vehicle = MagicMock(status="Available", booked_by=None)
        mark_booked(vehicle, 12)
        assert vehicle.status == "Booked"
        assert vehicle.booked_by == 12

    @pytest.mark.parametrize("raw", ["abc", "", None, "1.5"])
    def test_non_numeric_id_is_not_found(self, raw):
        with pytest.raises(VehicleNotFoundError):
            resolve_vehicle_id(raw)

    def test_numeric_id(self):
        assert resolve_vehicle_id(" 42 ") == 42

    def test_error_message_and_field(self):
        assert str(VehicleNotFoundError()) == "Vehicle not found"
        err = InvalidStatusError("Status must be one of Available", field="status")
        assert str(err) == "Status must be one of Available"
        assert err.field == "status"
