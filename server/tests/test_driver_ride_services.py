# server/tests/test_driver_ride_services.py
"""
Driver and ride services - records partitioned by company

Run with: pytest tests/test_driver_ride_services.py -v
"""
import pytest

from services.driver_service import DriverService
from services.ride_service import RideService
from utils.exceptions import ValidationError, NotFoundError

PICKUP = {"lat": 18.4861, "lng": -69.9312, "address": "Av. Winston Churchill, Santo Domingo"}
DROPOFF = {"lat": 18.4719, "lng": -69.9408, "address": "Av. Abraham Lincoln, Santo Domingo"}


@pytest.fixture
def driver(companies):
    return DriverService.create_driver_in_company("company_a", {
        "full_name": "Juan Pérez",
        "user_id": "driver-user-1",
        "phone": "+18095551234",
        "vehicle": {"make": "Toyota", "model": "Corolla", "year": 2019, "color": "Gris", "plate": "A123456"},
    })


def _ride(company_id="company_a", **overrides):
    data = {"customer_id": "customer-1", "pickup": PICKUP, "dropoff": DROPOFF}
    data.update(overrides)
    return RideService.create_ride(company_id, data)


# ==================== DRIVERS ====================

class TestDrivers:
    """Driver records"""

    def test_create_defaults(self, driver):
        assert driver.company_id == "company_a"
        assert driver.status == "offline"
        assert driver.completed_rides == 0
        assert driver.vehicle.plate == "A123456"

    def test_create_requires_name(self, companies):
        with pytest.raises(ValidationError):
            DriverService.create_driver_in_company("company_a", {"full_name": " "})

    def test_drivers_are_scoped_to_company(self, driver):
        DriverService.create_driver_in_company("company_b", {"full_name": "María López", "status": "available"})

        assert [d.id for d in DriverService.get_company_drivers("company_a")] == [driver.id]
        assert DriverService.get_driver_by_id("company_b", driver.id) is None
        assert len(DriverService.get_company_drivers("company_b", status="available")) == 1
        assert DriverService.get_company_drivers("company_b", status="busy") == []

    def test_lookup_by_user(self, driver):
        assert DriverService.get_driver_by_user_id("company_a", "driver-user-1").id == driver.id
        assert DriverService.get_driver_by_user_id("company_b", "driver-user-1") is None

    def test_update_leaves_status_alone(self, driver):
        updated = DriverService.update_driver("company_a", driver.id, {"rating": 4.7, "status": "busy"})
        assert updated.rating == 4.7
        assert updated.status == "offline"

    def test_update_status(self, driver):
        assert DriverService.update_driver_status("company_a", driver.id, "available").status == "available"

    def test_update_missing_driver(self, companies):
        with pytest.raises(NotFoundError):
            DriverService.update_driver_status("company_a", "ghost", "busy")

    def test_location(self, driver):
        updated = DriverService.update_driver_location("company_a", driver.id, 18.5, -69.9)

        assert updated.location.lat == 18.5
        assert updated.location.lng == -69.9
        assert updated.location.last_updated is not None

    def test_invalid_location(self, driver):
        with pytest.raises(ValidationError):
            DriverService.update_driver_location("company_a", driver.id, 120, 0)

    def test_location_feed(self, driver):
        DriverService.create_driver_in_company("company_a", {"full_name": "Sin Ubicación"})
        other = DriverService.create_driver_in_company("company_b", {"full_name": "Ana Martínez"})
        DriverService.update_driver_location("company_a", driver.id, 18.5, -69.9)
        DriverService.update_driver_location("company_b", other.id, 19.4, -70.7)

        feed = DriverService.get_driver_locations("company_a")
        assert [d["id"] for d in feed] == [driver.id]
        assert feed[0]["vehicle"]["plate"] == "A123456"
        assert feed[0]["last_updated"].endswith("Z")

        assert len(DriverService.get_driver_locations()) == 2


# ==================== RIDES ====================

class TestRides:
    """Ride lifecycle"""

    def test_create_defaults(self, companies):
        ride = _ride()
        assert ride.status == "pending"
        assert ride.timestamps.requested is not None
        assert ride.pickup.address == PICKUP["address"]

    @pytest.mark.parametrize("missing", ["customer_id", "pickup", "dropoff"])
    def test_create_requires_fields(self, companies, missing):
        with pytest.raises(ValidationError):
            _ride(**{missing: None})

    def test_status_with_timestamp(self, companies):
        ride = _ride()
        updated = RideService.update_ride_status("company_a", ride.id, "assigned", timestamp="accepted")

        assert updated.status == "assigned"
        assert updated.timestamps.accepted is not None
        assert updated.timestamps.requested == ride.timestamps.requested

    def test_status_rejects_unknown_timestamp(self, companies):
        ride = _ride()
        with pytest.raises(ValidationError):
            RideService.update_ride_status("company_a", ride.id, "completed", timestamp="requested")

    def test_any_transition_is_accepted(self, companies):
        ride = _ride(status="completed")
        assert RideService.update_ride_status("company_a", ride.id, "pending").status == "pending"

    def test_update_keeps_customer(self, companies, driver):
        ride = _ride()
        updated = RideService.update_ride("company_a", ride.id, {"driver_id": driver.id, "customer_id": "other"})
        assert updated.driver_id == driver.id
        assert updated.customer_id == "customer-1"

    def test_rides_are_scoped_to_company(self, companies):
        ride = _ride()
        assert RideService.get_ride_by_id("company_b", ride.id) is None
        with pytest.raises(NotFoundError):
            RideService.update_ride_status("company_b", ride.id, "cancelled")

    def test_company_rides_filters_and_order(self, companies):
        _ride(status="pending")
        _ride(status="completed")
        _ride(status="cancelled")
        _ride("company_b")

        by_status = RideService.get_company_rides("company_a", order_by_field="status", order_direction="asc")
        assert [r.status for r in by_status] == ["cancelled", "completed", "pending"]

        finished = RideService.get_company_rides("company_a", status=["completed", "cancelled"])
        assert {r.status for r in finished} == {"completed", "cancelled"}

        assert len(RideService.get_company_rides("company_a", status="pending")) == 1
        assert len(RideService.get_company_rides("company_a", limit=2)) == 2

    def test_company_rides_rejects_bad_ordering(self, companies):
        with pytest.raises(ValidationError):
            RideService.get_company_rides("company_a", order_by_field="customer_id")
        with pytest.raises(ValidationError):
            RideService.get_company_rides("company_a", order_direction="sideways")

    def test_by_customer_and_driver(self, companies, driver):
        _ride(customer_id="customer-9", driver_id=driver.id)
        _ride(customer_id="customer-9")

        assert len(RideService.get_rides_by_customer("company_a", "customer-9")) == 2
        assert len(RideService.get_rides_by_driver("company_a", driver.id)) == 1
        assert RideService.get_rides_by_customer("company_b", "customer-9") == []
