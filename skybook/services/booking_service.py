import logging
import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session

from skybook.core.errors import ConflictError, NotFoundError, ValidationError
from skybook.core.timeutil import isoformat
from skybook.models.booking import Booking
from skybook.models.flight import Flight
from skybook.services.access import ensure_owner_or_admin
from skybook.services.audit_service import log_audit
from skybook.services.flight_service import adjust_seats, flight_summary, lock_flight

logger = logging.getLogger(__name__)

PASSENGER_FIELDS = ("name", "email", "passportNumber")


def _clean_passengers(passengers: list[dict]) -> list[dict]:
    if not passengers:
        raise ValidationError("At least one passenger is required")
    out = []
    for p in passengers:
        row = {k: (p.get(k) or "").strip() for k in PASSENGER_FIELDS}
        for k, label in (("name", "name"), ("email", "email"), ("passportNumber", "passport number")):
            if not row[k]:
                raise ValidationError(f"Please add passenger {label}")
        out.append(row)
    return out


def load_booking(db: Session, booking_id: str, for_update: bool = False) -> Booking:
    q = select(Booking).where(Booking.id == booking_id)
    if for_update:
        q = q.with_for_update()
    b = db.execute(q).scalar_one_or_none()
    if not b:
        raise NotFoundError("Booking not found")
    return b


def create_booking(db: Session, user_id: str, flight_id: str, passengers: list[dict]) -> Booking:
    pax = _clean_passengers(passengers)
    requested = len(pax)

    # Row lock holds until commit, so the seat check and the decrement see the same count.
    flight = lock_flight(db, flight_id)
    if not flight:
        raise NotFoundError("Flight not found")
    if flight.available_seats < requested:
        raise ConflictError("Not enough seats available")

    booking = Booking(
        id=str(uuid.uuid4()),
        user_id=user_id,
        flight_id=flight.id,
        passengers=pax,
        status="pending",
        payment_status="pending",
        check_in_status=False,
        total_price=flight.price * requested,
    )
    db.add(booking)
    adjust_seats(db, flight.id, -requested)
    log_audit(db, user_id, "booking.create", booking.id,
              flightId=flight.id, seats=requested, totalPrice=booking.total_price)
    db.commit()
    db.refresh(booking)
    logger.info("booking %s created on flight %s for %d passenger(s)", booking.id, flight.flight_number, requested)
    return booking


def get_booking(db: Session, booking_id: str, caller_id: str, caller_role: str) -> tuple[Booking, Flight | None]:
    b = load_booking(db, booking_id)
    ensure_owner_or_admin(b.user_id, caller_id, caller_role, "Not authorized to access this booking")
    return b, db.get(Flight, b.flight_id)


def list_bookings_for_user(db: Session, user_id: str) -> list[tuple[Booking, Flight | None]]:
    bookings = db.query(Booking).filter(Booking.user_id == user_id).order_by(Booking.booking_date.asc()).all()
    flight_ids = {b.flight_id for b in bookings}
    flights = {f.id: f for f in db.query(Flight).filter(Flight.id.in_(flight_ids)).all()} if flight_ids else {}
    return [(b, flights.get(b.flight_id)) for b in bookings]


def cancel_booking(db: Session, booking_id: str, caller_id: str, caller_role: str) -> Booking:
    b = load_booking(db, booking_id, for_update=True)
    ensure_owner_or_admin(b.user_id, caller_id, caller_role, "Not authorized to cancel this booking")
    if b.status == "cancelled":
        raise ConflictError("Booking is already cancelled")

    # payment_status is left as is; refunds are not modelled
    b.status = "cancelled"
    seats = len(b.passengers or [])
    restored = False
    if lock_flight(db, b.flight_id) is not None:
        adjust_seats(db, b.flight_id, seats)
        restored = True
    else:
        logger.warning("booking %s cancelled but flight %s no longer exists; no seats restored", b.id, b.flight_id)
    log_audit(db, caller_id, "booking.cancel", b.id, seatsRestored=seats if restored else 0)
    db.commit()
    db.refresh(b)
    logger.info("booking %s cancelled by %s", b.id, caller_id)
    return b


def serialize_booking(b: Booking, flight: Flight | None = None, joined: bool = False) -> dict:
    out = {
        "id": b.id,
        "user": b.user_id,
        "flightId": b.flight_id,
        "passengers": list(b.passengers or []),
        "status": b.status,
        "totalPrice": float(b.total_price),
        "paymentStatus": b.payment_status,
        "checkInStatus": bool(b.check_in_status),
        "bookingDate": isoformat(b.booking_date),
    }
    if joined:
        out["flight"] = flight_summary(flight)
    return out
