# server/services/dashboard_service.py
"""
Dashboard view helpers - search/filter and summary cards for the role pages.

Filters take the page's query values as-is: None, "" and "all" disable a
filter. Search is a case-insensitive substring match over a few fields.
"""
from typing import Any, Dict, Iterable, List, Optional

from services import mock_data
from utils.exceptions import ValidationError

ALL = "all"

STAT_FIELDS = ("total_rides", "active_drivers", "completion_rate", "avg_rating", "revenue")
SUPERADMIN_STAT_FIELDS = STAT_FIELDS + ("users", "regions")

STATS_BY_SCOPE = {
    "admin": (mock_data.ADMIN_STATS, STAT_FIELDS),
    "superadmin": (mock_data.SUPERADMIN_STATS, SUPERADMIN_STAT_FIELDS),
}


def _enabled(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def matches_search(term: Optional[str], *fields: Any) -> bool:
    """True when term is empty or a substring of any field (case-insensitive)."""
    if not term:
        return True
    needle = term.lower()
    return any(field is not None and needle in str(field).lower() for field in fields)


def filter_drivers(drivers: Iterable[Dict], search: Optional[str] = None,
                   status: Optional[str] = None) -> List[Dict]:
    """Search by name, email, phone and id; exact status match."""
    return [
        d for d in drivers
        if matches_search(search, d.get("full_name"), d.get("email"), d.get("phone"), d.get("id"))
        and (not _enabled(status) or d.get("status") == status)
    ]


def filter_rides(rides: Iterable[Dict], search: Optional[str] = None,
                 status: Optional[str] = None, date: Optional[str] = None) -> List[Dict]:
    """Search by pickup, dropoff, passenger, driver and id; exact status and date match."""
    return [
        r for r in rides
        if matches_search(
            search,
            r.get("pickup_address"), r.get("dropoff_address"),
            r.get("passenger_name"), r.get("driver_name"), r.get("id")
        )
        and (not _enabled(status) or r.get("status") == status)
        and (not _enabled(date) or r.get("date") == date)
    ]


def filter_users(users: Iterable[Dict], search: Optional[str] = None,
                 role: Optional[str] = None, status: Optional[str] = None) -> List[Dict]:
    return [
        u for u in users
        if matches_search(search, u.get("full_name"), u.get("email"), u.get("id"))
        and (not _enabled(role) or u.get("role") == role)
        and (not _enabled(status) or u.get("status") == status)
    ]


def filter_regions(regions: Iterable[Dict], search: Optional[str] = None,
                   status: Optional[str] = None) -> List[Dict]:
    return [
        r for r in regions
        if matches_search(search, r.get("name"), r.get("code"), r.get("id"))
        and (not _enabled(status) or r.get("status") == status)
    ]


def unique_dates(rides: Iterable[Dict]) -> List[str]:
    """Ride dates in first-seen order, for the date filter options."""
    return list(dict.fromkeys(r["date"] for r in rides if r.get("date")))


def summarize_admin_rides(rides: List[Dict]) -> Dict[str, Any]:
    """Summary cards of the admin rides page (computed over the whole list)."""
    completed = [r for r in rides if r.get("status") == "completed"]
    return {
        "total": len(rides),
        "completed": len(completed),
        "cancelled": sum(1 for r in rides if r.get("status") == "cancelled"),
        "in_progress": sum(1 for r in rides if r.get("status") == "in_progress"),
        "total_fare": sum(r.get("fare") or 0 for r in completed),
    }


def summarize_driver_rides(rides: List[Dict]) -> Dict[str, Any]:
    """Summary cards of the driver rides page (computed over the filtered list)."""
    completed = [r for r in rides if r.get("status") == "completed"]
    count = len(completed)
    total_fare = sum(r.get("fare") or 0 for r in completed)
    total_distance = sum(r.get("distance") or 0 for r in completed)

    return {
        "total": len(rides),
        "completed": count,
        "total_fare": total_fare,
        "average_fare": round(total_fare / count) if count else 0,
        "total_distance": round(total_distance, 1),
        "average_distance": round(total_distance / count, 1) if count else 0,
        "average_rating": round(sum(r.get("rating") or 0 for r in completed) / count, 1) if count else 0,
    }


def calculate_change(current: float, previous: float) -> str:
    """
    Percentage change as shown on stat cards.

    >>> calculate_change(110, 100)
    '+10.0%'
    >>> calculate_change(90, 100)
    '-10.0%'
    >>> calculate_change(5, 0)
    '+0%'
    """
    if not previous:
        return "+0%"
    change = (current - previous) / previous * 100
    return f"+{change:.1f}%" if change > 0 else f"{change:.1f}%"


def get_stats(scope: str, period: str) -> Dict[str, Any]:
    """
    Stats rows for a dashboard scope and period, with the change of the
    latest row against the one before it.

    Args:
        scope: admin or superadmin
        period: day, week or month

    Raises:
        ValidationError: If scope or period is unknown
    """
    if scope not in STATS_BY_SCOPE:
        raise ValidationError(f"Unknown stats scope: {scope}")
    dataset, fields = STATS_BY_SCOPE[scope]
    if period not in dataset:
        raise ValidationError(f"Invalid period: {period}", {"allowed": list(dataset)})

    rows = dataset[period]
    current = rows[0]
    previous = rows[1] if len(rows) > 1 else {}

    result = {
        "scope": scope,
        "period": period,
        "rows": rows,
        "current": current,
        "changes": {f: calculate_change(current[f], previous.get(f, 0)) for f in fields},
    }
    if scope == "superadmin":
        result["regions"] = mock_data.REGION_STATS
    return result
