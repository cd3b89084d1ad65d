import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from skybook.core.errors import ConflictError, NotFoundError, UnauthorizedError
from skybook.models.booking import Booking
from skybook.models.flight import Flight
from skybook.services.audit_service import history
from skybook.services.checkin_service import perform_check_in

NOW = datetime(2031, 3, 1, 12, 0, tzinfo=timezone.utc)


def _paid_booking(db, user, departure, payment_status="completed", status="confirmed"):
    flight = Flight(
        id=str(uuid.uuid4()),
        flight_number=f"CI{uuid.uuid4().hex[:6]}",
        airline="SkyBook Air",
        departure_city="Porto",
        arrival_city="Rome",
        departure_time=departure,
        arrival_time=departure + timedelta(hours=2),
        price=Decimal("100"),
        available_seats=5,
    )
    booking = Booking(
        id=str(uuid.uuid4()),
        user_id=user.id,
        flight_id=flight.id,
        passengers=[{"name": "A", "email": "a@example.com", "passportNumber": "X1"}],
        status=status,
        payment_status=payment_status,
        check_in_status=False,
        total_price=Decimal("100"),
    )
    db.add_all([flight, booking])
    db.commit()
    return booking


@pytest.mark.parametrize("hours", [24, 0, 12, 0.5])
def test_check_in_inside_window(db, user, hours):
    booking = _paid_booking(db, user, NOW + timedelta(hours=hours))
    checked = perform_check_in(db, booking.id, user.id, user.role, now=NOW)
    assert checked.check_in_status is True


@pytest.mark.parametrize("hours,message", [
    (25, "Check-in is only available within 24 hours of departure"),
    (24.01, "Check-in is only available within 24 hours of departure"),
    (-1, "Cannot check-in after departure"),
])
def test_check_in_outside_window(db, user, hours, message):
    booking = _paid_booking(db, user, NOW + timedelta(hours=hours))
    with pytest.raises(ConflictError) as exc:
        perform_check_in(db, booking.id, user.id, user.role, now=NOW)
    assert exc.value.message == message


def test_check_in_needs_completed_payment(db, user):
    booking = _paid_booking(db, user, NOW + timedelta(hours=2), payment_status="pending", status="pending")
    with pytest.raises(ConflictError) as exc:
        perform_check_in(db, booking.id, user.id, user.role, now=NOW)
    assert exc.value.message == "Payment must be completed before check-in"


def test_check_in_refused_for_cancelled_booking(db, user):
    booking = _paid_booking(db, user, NOW + timedelta(hours=2), status="cancelled")
    with pytest.raises(ConflictError) as exc:
        perform_check_in(db, booking.id, user.id, user.role, now=NOW)
    assert exc.value.message == "Cannot check-in for a cancelled booking"


def test_check_in_only_once(db, user):
    booking = _paid_booking(db, user, NOW + timedelta(hours=2))
    perform_check_in(db, booking.id, user.id, user.role, now=NOW)
    with pytest.raises(ConflictError) as exc:
        perform_check_in(db, booking.id, user.id, user.role, now=NOW)
    assert exc.value.message == "Already checked in"


def test_check_in_ownership(db, user, other_user, admin):
    booking = _paid_booking(db, user, NOW + timedelta(hours=2))
    with pytest.raises(UnauthorizedError):
        perform_check_in(db, booking.id, other_user.id, other_user.role, now=NOW)
    assert perform_check_in(db, booking.id, admin.id, admin.role, now=NOW).check_in_status is True


def test_check_in_unknown_booking(db, user):
    with pytest.raises(NotFoundError):
        perform_check_in(db, "missing", user.id, user.role, now=NOW)


def test_check_in_over_http(client, db, user, create_flight, book, user_headers, other_headers):
    departure = datetime.now(timezone.utc) + timedelta(hours=3)
    flight = create_flight(departureTime=departure.isoformat(),
                           arrivalTime=(departure + timedelta(hours=2)).isoformat())
    booking = book(flight["id"], user_headers).json()["data"]

    res = client.put(f"/api/v1/check-in/{booking['id']}", headers=user_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Payment must be completed before check-in"

    client.post("/api/v1/payments", json={"bookingId": booking["id"], "paymentMethod": "debit_card"},
                headers=user_headers)

    res = client.get(f"/api/v1/check-in/{booking['id']}", headers=user_headers)
    assert res.status_code == 200
    status = res.json()["data"]
    assert status["checkInStatus"] is False
    assert status["flight"]["flightNumber"] == flight["flightNumber"]
    assert "arrivalTime" not in status["flight"]
    assert len(status["passengers"]) == 1

    assert client.put(f"/api/v1/check-in/{booking['id']}", headers=other_headers).status_code == 401
    assert client.get(f"/api/v1/check-in/{booking['id']}", headers=other_headers).status_code == 401

    res = client.put(f"/api/v1/check-in/{booking['id']}", headers=user_headers)
    assert res.status_code == 200
    assert res.json()["data"]["checkInStatus"] is True
    assert client.get(f"/api/v1/check-in/{booking['id']}", headers=user_headers).json()["data"]["checkInStatus"]

    assert client.get("/api/v1/check-in/missing", headers=user_headers).status_code == 404

    trail = history(db, "booking", booking["id"])
    assert [e["action"] for e in trail].count("booking.check_in") == 1
    assert {"booking.create", "payment.completed", "booking.check_in"} == {e["action"] for e in trail}
    assert all(e["actor"] == user.id for e in trail)
