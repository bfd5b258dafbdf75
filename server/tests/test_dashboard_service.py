# server/tests/test_dashboard_service.py
"""
Dashboard page helpers - filters, summary cards and stats

Run with: pytest tests/test_dashboard_service.py -v
"""
import pytest

from services import dashboard_service, mock_data
from utils.exceptions import ValidationError


class TestFilters:
    """Search and status filters of the list pages"""

    def test_drivers_search_and_status(self):
        result = dashboard_service.filter_drivers(mock_data.DRIVERS, "juan", "active")
        assert [d["id"] for d in result] == ["driver_001"]

    @pytest.mark.parametrize("status", ["all", None, ""])
    def test_all_disables_filter(self, status):
        assert dashboard_service.filter_drivers(mock_data.DRIVERS, None, status) == mock_data.DRIVERS

    def test_drivers_search_by_phone(self):
        result = dashboard_service.filter_drivers(mock_data.DRIVERS, "+1555")
        assert [d["id"] for d in result] == ["driver_003"]

    def test_rides_search_by_passenger_and_date(self):
        rides = [
            {"id": "r1", "status": "completed", "passenger_name": "Ana Torres", "date": "2023-10-20"},
            {"id": "r2", "status": "completed", "passenger_name": "Ana Torres", "date": "2023-10-19"},
            {"id": "r3", "status": "cancelled", "passenger_name": "Luis", "date": "2023-10-20"},
        ]
        assert [r["id"] for r in dashboard_service.filter_rides(rides, "ana", "all", "2023-10-20")] == ["r1"]
        assert [r["id"] for r in dashboard_service.filter_rides(rides, status="cancelled")] == ["r3"]

    def test_users_by_role(self):
        admins = dashboard_service.filter_users(mock_data.USERS, role="admin")
        assert admins and all(u["role"] == "admin" for u in admins)

    def test_regions_no_match(self):
        assert dashboard_service.filter_regions(mock_data.REGIONS, "atlantis") == []

    def test_unique_dates_keep_first_seen_order(self):
        rides = [{"date": "2023-10-20"}, {"date": "2023-10-19"}, {"date": "2023-10-20"}, {}]
        assert dashboard_service.unique_dates(rides) == ["2023-10-20", "2023-10-19"]


class TestSummaries:
    """Summary cards"""

    RIDES = [
        {"status": "completed", "fare": 250, "distance": 5.7, "rating": 5},
        {"status": "completed", "fare": 150, "distance": 2.1, "rating": 4},
        {"status": "cancelled", "fare": 0, "distance": 2.8, "rating": None},
        {"status": "in_progress", "fare": 220, "distance": 4.3, "rating": None},
    ]

    def test_admin_summary(self):
        assert dashboard_service.summarize_admin_rides(self.RIDES) == {
            "total": 4,
            "completed": 2,
            "cancelled": 1,
            "in_progress": 1,
            "total_fare": 400,
        }

    def test_driver_summary(self):
        summary = dashboard_service.summarize_driver_rides(self.RIDES)
        assert summary["completed"] == 2
        assert summary["total_fare"] == 400
        assert summary["average_fare"] == 200
        assert summary["total_distance"] == 7.8
        assert summary["average_distance"] == 3.9
        assert summary["average_rating"] == 4.5

    def test_driver_summary_without_completed_rides(self):
        summary = dashboard_service.summarize_driver_rides([])
        assert summary["average_fare"] == 0
        assert summary["average_rating"] == 0


class TestStats:
    """Stat cards and period comparison"""

    @pytest.mark.parametrize("current,previous,expected", [
        (110, 100, "+10.0%"),
        (90, 100, "-10.0%"),
        (100, 100, "0.0%"),
        (5, 0, "+0%"),
    ])
    def test_calculate_change(self, current, previous, expected):
        assert dashboard_service.calculate_change(current, previous) == expected

    def test_admin_stats(self):
        stats = dashboard_service.get_stats("admin", "week")
        assert stats["current"] == mock_data.ADMIN_STATS["week"][0]
        assert set(stats["changes"]) == set(dashboard_service.STAT_FIELDS)
        assert "regions" not in stats

    def test_superadmin_stats_include_regions(self):
        stats = dashboard_service.get_stats("superadmin", "month")
        assert "users" in stats["changes"]
        assert stats["regions"] == mock_data.REGION_STATS

    def test_unknown_period(self):
        with pytest.raises(ValidationError):
            dashboard_service.get_stats("admin", "year")

    def test_unknown_scope(self):
        with pytest.raises(ValidationError):
            dashboard_service.get_stats("driver", "week")
