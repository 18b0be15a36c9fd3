from datetime import datetime

import pytest

from marketplace.errors import ValidationError
from marketplace.schemas import BookingStatus

USER_ID = "demo-user"
WHEN = datetime(2026, 11, 3, 10, 0)


def test_create_booking_is_pending(booking_service):
    booking = booking_service.create_booking(USER_ID, "prov1", "Build a wardrobe", WHEN, 50000)

    assert booking.status == BookingStatus.PENDING
    assert booking.provider_id == "prov1"
    assert booking.scheduled_date == WHEN
    assert booking.total_cost == 50000


def test_unknown_provider_is_accepted(booking_service):
    booking = booking_service.create_booking(USER_ID, "prov-missing", "Fix the sink", WHEN, 3000)
    assert booking.provider_id == "prov-missing"


@pytest.mark.parametrize("provider_id, description, scheduled, cost, field", [
    ("", "Fix", WHEN, 100, "providerId"),
    ("prov1", "  ", WHEN, 100, "serviceDescription"),
    ("prov1", "Fix", "tomorrow", 100, "scheduledDate"),
    ("prov1", "Fix", WHEN, -5, "totalCost"),
])
def test_create_booking_validation(booking_service, provider_id, description, scheduled, cost, field):
    with pytest.raises(ValidationError) as exc_info:
        booking_service.create_booking(USER_ID, provider_id, description, scheduled, cost)

    assert exc_info.value.message == "Invalid booking data"
    assert [e["field"] for e in exc_info.value.errors] == [field]
    assert booking_service.list_bookings(USER_ID) == []


def test_list_bookings_is_per_user(booking_service):
    mine = booking_service.create_booking(USER_ID, "prov2", "Braids", WHEN, 8000)
    booking_service.create_booking("other", "prov3", "Rewire kitchen", WHEN, 20000)

    assert [b.id for b in booking_service.list_bookings(USER_ID)] == [mine.id]
