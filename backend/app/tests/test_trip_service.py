"""
Tests for the trip aggregate assembler.
"""
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from app.core.config import settings
from app.services.trip_service import (
    normalize_legacy_itinerary,
    normalize_status,
    project_trip,
    project_trips,
)


def make_trip(**overrides):
    fields = dict(
        id=1,
        title="Palawan",
        destination="El Nido",
        start_date=date(2025, 3, 1),
        end_date=date(2025, 3, 7),
        budget=Decimal("50000"),
        companions=2,
        status="upcoming",
        image="https://example.com/palawan.jpg",
        itinerary=[{"day": 1, "time": "08:00", "activity": "stale entry"}],
        created_at=datetime(2025, 1, 10, 8, 0),
        updated_at=datetime(2025, 1, 11, 8, 0),
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_activity(id, start_time, cost):
    return SimpleNamespace(
        id=id, title="Kayaking", location="Lagoon", start_time=start_time,
        cost=cost, created_at=datetime(2025, 2, 1, 9, 0),
    )


def test_assembled_trip_shape():
    activities = [make_activity("a1", datetime(2025, 3, 2, 9, 30), Decimal("1500"))]
    assembled = project_trip(make_trip(), activities)
    body = assembled.model_dump(by_alias=True, mode="json")

    assert body["budget"] == "₱50,000"
    assert body["totalSpent"] == 1500.0
    assert body["remainingBudget"] == 48500.0
    assert body["startDate"] == "2025-03-01"
    assert body["itinerary"] == [{
        "id": "a1",
        "day": 2,
        "time": "09:30",
        "activity": "Kayaking",
        "location": "Lagoon",
        "budget": 1500.0,
        "createdAt": "2025-02-01T09:00:00",
    }]


def test_stored_itinerary_blob_is_never_served():
    assembled = project_trip(make_trip(), [])
    assert assembled.itinerary == []


def test_planning_status_normalized():
    assert project_trip(make_trip(status="planning"), []).status == "upcoming"
    assert normalize_status(None) == "upcoming"
    assert normalize_status("completed") == "completed"


def test_missing_image_falls_back_to_default():
    assert project_trip(make_trip(image=""), []).image == settings.DEFAULT_TRIP_IMAGE
    assert project_trip(make_trip(image=None), []).image == settings.DEFAULT_TRIP_IMAGE


def test_missing_companions_default_to_one():
    assert project_trip(make_trip(companions=None), []).companions == 1


def test_negative_remaining_budget_reported():
    activities = [make_activity("a1", datetime(2025, 3, 1, 9, 0), Decimal("60000"))]
    assembled = project_trip(make_trip(), activities)
    assert assembled.remaining_budget == -10000.0
    assert assembled.budget == "₱50,000"


def test_malformed_trip_gets_placeholder():
    broken = make_trip(title=None, start_date=None, status="planning", image=None, budget="₱9,000")
    activities = [make_activity("a1", datetime(2025, 3, 1, 9, 0), Decimal("100"))]
    assembled = project_trip(broken, activities)

    assert assembled.id == 1
    assert assembled.title == "Untitled Trip"
    assert assembled.budget == "₱0"
    assert assembled.itinerary == []
    assert assembled.total_spent == 0.0
    assert assembled.remaining_budget == 0.0
    assert assembled.status == "upcoming"
    assert assembled.image == settings.DEFAULT_TRIP_IMAGE
    assert assembled.start_date == date.today()


def test_one_broken_trip_does_not_fail_the_list():
    good = make_trip(id=1)
    broken = make_trip(id=2, end_date="not a date")
    activities = {"1": [make_activity("a1", datetime(2025, 3, 1, 9, 0), Decimal("100"))]}

    assembled = project_trips([good, broken], activities)

    assert [trip.id for trip in assembled] == [1, 2]
    assert assembled[0].total_spent == 100.0
    assert assembled[1].itinerary == []


def test_corrupted_activity_does_not_break_trip():
    activities = [
        make_activity("ok", datetime(2025, 3, 2, 10, 0), Decimal("200")),
        make_activity("bad", "31/02/2025 99:99", Decimal("50")),
    ]
    assembled = project_trip(make_trip(), activities)
    assert [(item.id, item.day, item.time) for item in assembled.itinerary] == [
        ("ok", 2, "10:00"),
        ("bad", 1, ""),
    ]
    assert assembled.total_spent == 250.0


def test_normalize_legacy_itinerary():
    assert normalize_legacy_itinerary(None) == []
    assert normalize_legacy_itinerary([{"day": 1}]) == [{"day": 1}]
    assert normalize_legacy_itinerary('[{"day": 2}]') == [{"day": 2}]
    assert normalize_legacy_itinerary("{not json") == []
    assert normalize_legacy_itinerary('{"day": 1}') == []
