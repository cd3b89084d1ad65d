"""Online check-in.

A booking's check-in flag goes false -> true exactly once. It is allowed only
for a paid, non-cancelled booking, from 24 hours before departure up to the
moment of departure (both ends inclusive).
"""
import logging
from datetime import datetime
from sqlalchemy.orm import Session

from skybook.core.errors import ConflictError, NotFoundError
from skybook.core.timeutil import from_db, utcnow
from skybook.models.booking import Booking
from skybook.models.flight import Flight
from skybook.services.access import ensure_owner_or_admin
from skybook.services.audit_service import log_audit
from skybook.services.booking_service import load_booking
from skybook.services.flight_service import flight_summary

logger = logging.getLogger(__name__)

CHECK_IN_OPENS_HOURS = 24

STATUS_FLIGHT_FIELDS = ("flightNumber", "airline", "departureCity", "arrivalCity", "departureTime")


def hours_until(departure: datetime, now: datetime) -> float:
    return (from_db(departure) - from_db(now)).total_seconds() / 3600


def perform_check_in(db: Session, booking_id: str, caller_id: str, caller_role: str,
                     now: datetime | None = None) -> Booking:
    b = load_booking(db, booking_id, for_update=True)
    ensure_owner_or_admin(b.user_id, caller_id, caller_role, "Not authorized to check-in for this booking")
    if b.status == "cancelled":
        raise ConflictError("Cannot check-in for a cancelled booking")
    if b.payment_status != "completed":
        raise ConflictError("Payment must be completed before check-in")
    if b.check_in_status:
        raise ConflictError("Already checked in")

    flight = db.get(Flight, b.flight_id)
    if not flight:
        raise NotFoundError("Flight not found")

    hours = hours_until(flight.departure_time, now or utcnow())
    if hours > CHECK_IN_OPENS_HOURS:
        raise ConflictError("Check-in is only available within 24 hours of departure")
    if hours < 0:
        raise ConflictError("Cannot check-in after departure")

    b.check_in_status = True
    log_audit(db, caller_id, "booking.check_in", b.id, hoursUntilDeparture=round(hours, 2))
    db.commit()
    db.refresh(b)
    logger.info("booking %s checked in (%.1fh before departure)", b.id, hours)
    return b


def get_check_in_status(db: Session, booking_id: str, caller_id: str, caller_role: str) -> dict:
    b = load_booking(db, booking_id)
    ensure_owner_or_admin(b.user_id, caller_id, caller_role, "Not authorized to access this booking")
    return {
        "checkInStatus": bool(b.check_in_status),
        "flight": flight_summary(db.get(Flight, b.flight_id), STATUS_FLIGHT_FIELDS),
        "passengers": list(b.passengers or []),
    }
